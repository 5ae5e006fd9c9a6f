"""Face avatar renderer for Minecraft-layout skin sheets.

Crops the 8x8 head front from a skin sheet, optionally composites the hat
layer on top, and blows it up to 96x96 with nearest-neighbour scaling so
the result stays blocky and byte-for-byte reproducible.

Skin layout (in units of the 64-pixel-wide base sheet)::

    base face   x 8..16,  y 8..16
    hat overlay x 40..48, y 8..16

Both the legacy 64x32 and the modern 64x64 layouts carry these regions;
HD sheets (128, 256, ... wide) are handled by scaling the offsets.
"""

from __future__ import annotations

import io

from PIL import Image

from skinface.identity.errors import TextureDecodeError, TextureEncodeError
from skinface.identity.types import AVATAR_SIZE, RenderedAvatar

# Width of the reference sheet the offsets below are expressed in
_SHEET_UNIT = 64

# (left, top, right, bottom) in reference-sheet pixels
_FACE_BOX = (8, 8, 16, 16)
_HAT_BOX = (40, 8, 48, 16)


def _scaled(box: tuple[int, int, int, int], scale: int) -> tuple[int, int, int, int]:
    return tuple(v * scale for v in box)  # type: ignore[return-value]


def decode_skin(texture: bytes) -> Image.Image:
    """Decode *texture* as a PNG skin sheet into a straight-alpha RGBA image.

    Palette, greyscale and alpha-less sheets are all converted uniformly.

    Raises:
        TextureDecodeError: If the bytes are not a PNG, or the sheet does
            not have a skin layout (width a multiple of 64, height equal to
            the width or half of it).
    """
    try:
        with Image.open(io.BytesIO(texture), formats=["PNG"]) as img:
            img.load()
            sheet = img.convert("RGBA")
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise TextureDecodeError(f"Texture is not a decodable PNG: {exc}") from exc

    width, height = sheet.size
    if width < _SHEET_UNIT or width % _SHEET_UNIT or height not in (width, width // 2):
        raise TextureDecodeError(f"Unsupported skin sheet size {width}x{height}")
    return sheet


def compose_face(sheet: Image.Image, overlay: bool = True) -> Image.Image:
    """Return the 8x8 (times sheet scale) face crop of an RGBA *sheet*.

    The base layer is forced opaque, as the game renders it; the hat layer
    only shows where its own alpha is non-zero.
    """
    scale = sheet.size[0] // _SHEET_UNIT
    face = sheet.crop(_scaled(_FACE_BOX, scale))
    face.putalpha(255)
    if overlay:
        hat = sheet.crop(_scaled(_HAT_BOX, scale))
        face = Image.alpha_composite(face, hat)
    return face


def _encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise TextureEncodeError(f"Failed to encode avatar as PNG: {exc}") from exc
    return buf.getvalue()


def render_face(texture: bytes, overlay: bool = True) -> RenderedAvatar:
    """Render a 96x96 PNG face avatar from raw skin sheet bytes.

    Pure: the same *texture* and *overlay* always yield identical bytes.

    Raises:
        TextureDecodeError: The input is not a usable skin sheet.
        TextureEncodeError: The output could not be encoded.
    """
    sheet = decode_skin(texture)
    face = compose_face(sheet, overlay=overlay)
    face = face.resize((AVATAR_SIZE, AVATAR_SIZE), Image.NEAREST)
    return RenderedAvatar(data=_encode_png(face), overlay=overlay)
