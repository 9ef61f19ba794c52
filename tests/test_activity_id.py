import random

import pytest

from phixiv.shared.exceptions import InvalidActivityId
from phixiv.utils.activity_id import CompactActivityId, decode, encode


class TestEncode:
    def test_bit_layout(self) -> None:
        value = encode('en', 12345, index=2, offset_end=3)

        assert value == (3 << 56) | (1 << 48) | (12345 << 16) | 2

    def test_default_is_plain_illust_id_shift(self) -> None:
        assert encode('jp', 98765432) == 98765432 << 16

    @pytest.mark.parametrize(
        ('language', 'wire_id'),
        [('jp', 0), ('en', 1), ('zh', 2), ('zh_tw', 3), ('ko', 4)],
    )
    def test_language_ids(self, language: str, wire_id: int) -> None:
        assert (encode(language, 1) >> 48) & 0xFF == wire_id

    def test_unknown_language_encodes_as_jp(self) -> None:
        assert encode('fr', 42) == encode('jp', 42)

    def test_offset_end_is_clamped(self) -> None:
        assert encode('jp', 1, offset_end=300) >> 56 == 0xFF
        assert encode('jp', 1, offset_end=-5) >> 56 == 0

    def test_fits_in_unsigned_64_bits(self) -> None:
        value = encode('ko', 0xFFFF_FFFF, index=0xFFFF, offset_end=0xFF)

        assert 0 <= value <= 0xFFFF_FFFF_FFFF_FFFF


class TestDecode:
    @pytest.mark.parametrize(
        'activity_id',
        [
            CompactActivityId('jp', 0, 0, 0),
            CompactActivityId('en', 12345, 2, 3),
            CompactActivityId('zh_tw', 0xFFFF_FFFF, 0xFFFF, 0xFF),
            CompactActivityId('ko', 110_000_000, 7, 0),
        ],
    )
    def test_inverts_encode(self, activity_id: CompactActivityId) -> None:
        assert decode(activity_id.to_int()) == activity_id

    @pytest.mark.parametrize('language_id', range(5))
    def test_encode_restores_u64_with_known_language(self, language_id: int) -> None:
        rng = random.Random(language_id)

        for _ in range(2000):
            value = rng.getrandbits(64) & ~(0xFF << 48) | (language_id << 48)
            decoded = decode(value)

            assert encode(decoded.language, decoded.id, decoded.index, decoded.offset_end) == value

    def test_unknown_language_byte_reencodes_as_jp(self) -> None:
        value = (2 << 56) | (0x7F << 48) | (12345 << 16) | 3
        decoded = decode(value)

        reencoded = encode(decoded.language, decoded.id, decoded.index, decoded.offset_end)

        assert (reencoded >> 48) & 0xFF == 0
        assert reencoded == value & ~(0xFF << 48)

    def test_unknown_language_id_decodes_as_jp(self) -> None:
        decoded = decode((0x7F << 48) | (5 << 16))

        assert decoded.language == 'jp'
        assert decoded.id == 5

    def test_str_and_int_conversions(self) -> None:
        activity_id = CompactActivityId('en', 1, 1)

        assert int(activity_id) == activity_id.to_int()
        assert str(activity_id) == str(activity_id.to_int())

    def test_last_index(self) -> None:
        assert CompactActivityId('jp', 1, index=2, offset_end=3).last_index == 5


class TestParse:
    def test_parses_decimal_string(self) -> None:
        value = encode('zh', 777, index=1)

        assert CompactActivityId.parse(str(value)) == CompactActivityId('zh', 777, 1)

    @pytest.mark.parametrize('text', ['', 'abc', '-1', '12a', '１２３'])
    def test_rejects_non_numeric(self, text: str) -> None:
        with pytest.raises(InvalidActivityId):
            CompactActivityId.parse(text)

    def test_rejects_values_above_u64(self) -> None:
        with pytest.raises(InvalidActivityId):
            CompactActivityId.parse(str(1 << 64))
