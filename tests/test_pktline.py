import pytest

from minigit.pktline import PktLineError, decode, encode, flush

WANT = "want 3b18e512dba79e4c8300dd08aeb37f8e728b8dad\n"


def test_encode_want_line():
    assert encode(WANT) == b"0032" + WANT.encode()


def test_encode_accepts_bytes():
    assert encode(WANT.encode()) == encode(WANT)


def test_decode_nak():
    assert decode(b"0008NAK\n") == (b"NAK\n", 8)


def test_decode_flush():
    assert decode(flush()) == (b"", 4)
    assert flush() == b"0000"


def test_decode_at_offset():
    stream = encode("first\n") + encode("second\n")
    first, after_first = decode(stream)
    second, after_second = decode(stream, after_first)
    assert first == b"first\n"
    assert second == b"second\n"
    assert after_second == len(stream)


@pytest.mark.parametrize("payload", [b"", b"x", b"done\n", b"\x00\x01\x02", b"a" * 1000])
def test_round_trip(payload):
    packet = encode(payload)
    assert decode(packet) == (payload, len(packet))


def test_decode_uppercase_hex_prefix():
    assert decode(b"000Ahello\n") == (b"hello\n", 10)


def test_decode_ignores_trailing_data():
    payload, end = decode(encode("abc") + b"PACK")
    assert payload == b"abc"
    assert end == 7


@pytest.mark.parametrize("data", [b"", b"00", b"003"])
def test_decode_short_prefix_raises(data):
    with pytest.raises(PktLineError):
        decode(data)


@pytest.mark.parametrize("data", [b"PACK\x00\x00\x00\x02", b"00x8NAK\n", b"-008NAK\n"])
def test_decode_invalid_prefix_raises(data):
    with pytest.raises(PktLineError):
        decode(data)


def test_decode_truncated_raises():
    with pytest.raises(PktLineError):
        decode(b"0032want")


@pytest.mark.parametrize("data", [b"0001", b"0002xx", b"0003xxx"])
def test_decode_impossible_length_raises(data):
    with pytest.raises(PktLineError):
        decode(data)


def test_encode_too_long_raises():
    with pytest.raises(PktLineError):
        encode(b"a" * 0xFFFF)


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        decode(b"zz")