import pytest
from hypothesis import given, strategies as st

from tigeropen.varint import decode_varint32, encode_varint32


def test_encode_decode_empty():
    encoded = encode_varint32(b"")
    assert encoded == b"\x00"
    msg, remaining = decode_varint32(encoded)
    assert msg == b""
    assert remaining == b""


def test_encode_decode_small():
    encoded = encode_varint32(b"hello")
    assert encoded[0] == 5
    assert encoded[1:] == b"hello"
    msg, remaining = decode_varint32(encoded)
    assert msg == b"hello"
    assert remaining == b""


def test_encode_decode_128_bytes():
    data = bytes([0xAB]) * 128
    encoded = encode_varint32(data)
    assert encoded[0] == 0x80
    assert encoded[1] == 0x01
    assert encoded[2:] == data
    msg, remaining = decode_varint32(encoded)
    assert msg == data
    assert remaining == b""


def test_encode_300_bytes_prefix():
    encoded = encode_varint32(bytes(300))
    assert encoded[:2] == b"\xac\x02"
    assert len(encoded) == 302


def test_decode_insufficient_header():
    assert decode_varint32(b"\x80") is None


def test_decode_insufficient_body():
    assert decode_varint32(bytes([10, 1, 2, 3])) is None


def test_decode_with_remaining():
    buffer = encode_varint32(b"abc") + encode_varint32(b"xyz")
    msg1, remaining = decode_varint32(buffer)
    assert msg1 == b"abc"
    msg2, remaining = decode_varint32(remaining)
    assert msg2 == b"xyz"
    assert remaining == b""


def test_decode_empty_buffer():
    assert decode_varint32(b"") is None


def test_decode_prefix_longer_than_five_bytes():
    assert decode_varint32(b"\x80\x80\x80\x80\x80\x00") is None


def test_decode_accepts_bytearray():
    msg, remaining = decode_varint32(bytearray(b"\x02hi!"))
    assert msg == b"hi"
    assert remaining == b"!"


def test_roundtrip_large():
    data = bytes([42]) * 16384
    msg, remaining = decode_varint32(encode_varint32(data))
    assert msg == data
    assert remaining == b""


@given(st.binary(max_size=10000))
def test_roundtrip_property(data):
    msg, remaining = decode_varint32(encode_varint32(data))
    assert msg == data
    assert remaining == b""


@given(st.binary(max_size=5000), st.floats(min_value=0.0, max_value=1.0))
def test_chunked_decode(data, split_pct):
    encoded = encode_varint32(data)
    split = min(int(len(encoded) * split_pct), len(encoded))
    first = encoded[:split]
    if split < len(encoded):
        assert decode_varint32(first) is None
    msg, remaining = decode_varint32(first + encoded[split:])
    assert msg == data
    assert remaining == b""


@pytest.mark.parametrize("size", [0, 1, 127, 128, 16383, 16384])
def test_prefix_length_boundaries(size):
    encoded = encode_varint32(bytes(size))
    expected_prefix = 1 if size < 128 else 2 if size < 16384 else 3
    assert len(encoded) == size + expected_prefix