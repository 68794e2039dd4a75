"""
atLS chunk codec.

Each placed sprite gets one private ancillary PNG chunk of type ``atLS``:

    name NUL  x:u32be y:u32be w:u32be h:u32be  [tl:u32be tt:u32be tr:u32be tb:u32be]

The trailing trim block is present only when a margin is non-zero; the
payload length alone tells the two layouts apart.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import MetadataFormatError

CHUNK_TYPE = b"atLS"
MAX_COORDINATE = 0xFFFFFFFF

_GEOMETRY = struct.Struct(">4I")


@dataclass
class SpriteRecord:
    """Decoded contents of one atLS chunk."""
    name: str
    x: int
    y: int
    width: int
    height: int
    trim_left: int = 0
    trim_top: int = 0
    trim_right: int = 0
    trim_bottom: int = 0

    @property
    def trimmed(self) -> bool:
        return bool(self.trim_left or self.trim_top or self.trim_right or self.trim_bottom)


def encode_record(sprite) -> bytes:
    """Build the atLS payload for a placed sprite (or a SpriteRecord)."""
    name = sprite.name.encode("utf-8", "surrogateescape")
    if b"\0" in name:
        raise MetadataFormatError(f"sprite name contains NUL: {sprite.name!r}")
    payload = name + b"\0" + _GEOMETRY.pack(sprite.x, sprite.y, sprite.width, sprite.height)
    if sprite.trimmed:
        payload += _GEOMETRY.pack(sprite.trim_left, sprite.trim_top,
                                  sprite.trim_right, sprite.trim_bottom)
    return payload


def decode_record(payload: bytes) -> SpriteRecord:
    """
    Parse an atLS payload.

    Raises:
        MetadataFormatError: missing NUL, wrong length, or margins that
            would overflow the restored frame size
    """
    end = payload.find(b"\0")
    if end < 0:
        raise MetadataFormatError("atLS chunk has no NUL-terminated name")
    rest = payload[end + 1:]
    if len(rest) not in (_GEOMETRY.size, 2 * _GEOMETRY.size):
        raise MetadataFormatError(f"atLS chunk has {len(rest)} data bytes, "
                                  f"expected {_GEOMETRY.size} or {2 * _GEOMETRY.size}")

    name = payload[:end].decode("utf-8", "surrogateescape")

    x, y, w, h = _GEOMETRY.unpack_from(rest, 0)
    record = SpriteRecord(name, x, y, w, h)
    if len(rest) > _GEOMETRY.size:
        (record.trim_left, record.trim_top,
         record.trim_right, record.trim_bottom) = _GEOMETRY.unpack_from(rest, _GEOMETRY.size)

    if (w + record.trim_left + record.trim_right > MAX_COORDINATE or
            h + record.trim_top + record.trim_bottom > MAX_COORDINATE):
        raise MetadataFormatError(f"atLS chunk for {name} has margins too large to restore")
    return record
