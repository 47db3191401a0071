"""Tray item helpers: item status, item addresses and icons built from ARGB pixmaps."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from PIL import Image

ITEM_OBJECT = "/StatusNotifierItem"
"""Object path used when an item address names only a bus."""

Pixmap = tuple[int, int, bytes]


class ParseStatusError(ValueError):
    """A string is not a recognised item status."""


class AddressError(ValueError):
    """An item address is neither ``{bus}{object_path}`` nor a unique bus name."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid address: {address}")
        self.address = address


class Status(Enum):
    """Recognised values of a tray item's ``Status`` property."""

    PASSIVE = "Passive"
    """Idle; visualisations are likely to hide the item."""
    ACTIVE = "Active"
    """The item should be shown to the user in some way."""
    NEEDS_ATTENTION = "NeedsAttention"
    """The item carries important information and should be emphasised."""

    @classmethod
    def parse(cls, text: str) -> "Status":
        """Read a status from its exact protocol spelling."""
        try:
            return cls(text)
        except ValueError:
            raise ParseStatusError(f"Invalid status {text!r}") from None

    def __str__(self) -> str:
        return self.value


def parse_item_address(service: str) -> tuple[str, str]:
    """Split ``{bus}{object_path}`` (e.g. ``:1.50/org/foo``) into bus name and object path.

    A bare unique bus name (starting with ``:``) gets the default item object path.
    """
    if "/" in service:
        addr, path = service.split("/", 1)
        return addr, f"/{path}"
    if service.startswith(":"):
        if len(service.encode("utf-8")) < 6:
            raise AddressError(service)
        return service[:6], ITEM_OBJECT
    raise AddressError(service)


def argb_to_rgba(data: bytes | bytearray | Iterable[int]) -> bytes:
    """Reorder every complete 4-byte ARGB pixel to RGBA; trailing bytes are kept as they are."""
    raw = bytes(data)
    whole = len(raw) - len(raw) % 4
    out = bytearray(raw)
    out[0:whole:4] = raw[1:whole:4]
    out[1:whole:4] = raw[2:whole:4]
    out[2:whole:4] = raw[3:whole:4]
    out[3:whole:4] = raw[0:whole:4]
    return bytes(out)


def icon_from_pixmap(width: int, height: int, data: bytes | bytearray | Iterable[int]) -> Image.Image:
    """Build an RGBA image from ARGB32 pixel data in network byte order."""
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid pixmap size {width}x{height}")
    rgba = argb_to_rgba(data)
    needed = width * height * 4
    if len(rgba) < needed:
        raise ValueError(f"pixmap of {width}x{height} needs {needed} bytes, got {len(rgba)}")
    return Image.frombytes("RGBA", (width, height), rgba[:needed], "raw", "RGBA", width * 4)


def _preference(pixmap: Pixmap, size: int) -> tuple[int, int]:
    width, height, _ = pixmap
    wanted = size * size
    area = width * height
    # Smallest pixmap at least as big as requested wins; otherwise the biggest one.
    if area >= wanted:
        return (1, -area)
    return (0, area)


def icon_from_pixmaps(pixmaps: Sequence[Pixmap], size: int) -> Image.Image | None:
    """Pick the most fitting pixmap and scale it to ``size`` x ``size``; None if there are none."""
    candidates = list(pixmaps)
    if not candidates:
        return None
    # On ties the last candidate wins.
    width, height, data = max(reversed(candidates), key=lambda p: _preference(p, size))
    image = icon_from_pixmap(width, height, data)
    if width != size or height != size:
        image = image.resize((size, size), Image.Resampling.BILINEAR)
    return image