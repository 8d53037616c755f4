import pytest

from twsefeed.fields import Bcd, Verification, fixed_ascii, fixed_key


def test_bcd_to_int_worked_example():
    assert Bcd(bytes.fromhex("1234")).to_int() == 1234


@pytest.mark.parametrize("hex_digits", ["00", "09", "99", "0000058000", "12345678"])
def test_bcd_digits_round_trip(hex_digits):
    value = Bcd(bytes.fromhex(hex_digits))
    assert value.digits() == hex_digits
    assert value.to_int() == int(hex_digits)


def test_bcd_to_float_scales_by_decimal_places():
    value = Bcd(bytes.fromhex("0000040250"))
    assert value.to_float(0) == float(value.to_int())
    assert value.to_float(2) * 100 == pytest.approx(value.to_int())


def test_bcd_indexing_and_bytes():
    raw = bytes.fromhex("0102")
    value = Bcd(raw)
    assert value[1] == raw[1]
    assert bytes(value) == raw
    assert len(value) == len(raw)


def test_bcd_accepts_bytearray_and_stays_immutable():
    source = bytearray(b"\x12")
    value = Bcd(source)
    source[0] = 0x34
    assert value.raw == b"\x12"


def test_to_decimal_string_inserts_point():
    value = Bcd(bytes.fromhex("0000040250"))
    text = value.to_decimal_string(2)
    whole, fraction = text.split(".")
    assert len(fraction) == 2
    assert whole + fraction == value.digits()


def test_to_decimal_string_pads_short_values():
    assert Bcd(b"\x05").to_decimal_string(3) == "0.005"


@pytest.mark.parametrize("places", [0, -1])
def test_to_decimal_string_rejects_non_positive_places(places):
    with pytest.raises(ValueError):
        Bcd(b"\x12").to_decimal_string(places)


def test_fixed_ascii_stops_at_nul():
    assert fixed_ascii(b"2330\x00\x00") == "2330"
    assert fixed_ascii(b"ABCDEF") == "ABCDEF"
    assert fixed_ascii(b"\x00ABC") == ""


def test_fixed_key_pads_and_truncates():
    key = fixed_key("2330", 6)
    assert len(key) == 6
    assert key.startswith("2330")
    assert key == fixed_key(b"2330\x00\x00", 6)
    assert fixed_key("1234567", 6) == fixed_key("123456", 6)


def test_fixed_key_keeps_spaces_distinct_from_padding():
    assert fixed_key("2330  ", 6) != fixed_key("2330", 6)
    assert fixed_key("2330  ", 6) == "2330  "


def test_verification_ok_requires_all_checks():
    assert Verification(True, True, True).ok() is True
    assert Verification(False, True, True).ok() is False
    assert Verification(True, False, True).ok() is False
    assert Verification(True, True, False).ok() is False