"""Varint32 length-prefix framing for protobuf messages.

Each byte carries seven bits of the length, low bits first; the high bit
marks that another byte follows. A prefix is at most five bytes long.
"""

from __future__ import annotations

__all__ = ["encode_varint32", "decode_varint32"]

_MAX_PREFIX_BYTES = 5
_UINT32_MAX = 0xFFFFFFFF


def encode_varint32(data: bytes) -> bytes:
    """Return ``data`` preceded by its length encoded as a varint32."""
    length = len(data)
    if length > _UINT32_MAX:
        raise ValueError(f"frame of {length} bytes exceeds the varint32 range")

    prefix = bytearray()
    value = length
    while value & ~0x7F:
        prefix.append((value & 0x7F) | 0x80)
        value >>= 7
    prefix.append(value)
    return bytes(prefix) + bytes(data)


def decode_varint32(buffer: bytes) -> tuple[bytes, bytes] | None:
    """Split one complete frame off the front of ``buffer``.

    Returns ``(message, remaining)`` or ``None`` when the buffer does not yet
    hold a whole prefix or a whole message body.
    """
    value = 0
    for position, byte in enumerate(buffer[:_MAX_PREFIX_BYTES]):
        value = (value | ((byte & 0x7F) << (7 * position))) & _UINT32_MAX
        if not byte & 0x80:
            header_len = position + 1
            end = header_len + value
            if len(buffer) < end:
                return None
            return bytes(buffer[header_len:end]), bytes(buffer[end:])
    return None