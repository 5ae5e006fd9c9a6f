"""skinface rendering -- skin sheet download and face avatar rendering."""

from skinface.render.face import compose_face, decode_skin, render_face
from skinface.render.textures import fetch_texture_bytes

__all__ = [
    "compose_face",
    "decode_skin",
    "render_face",
    "fetch_texture_bytes",
]
