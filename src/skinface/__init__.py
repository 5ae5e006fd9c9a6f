"""skinface -- Minecraft face avatars from Mojang, Ely.by and Drasl.

Top-level convenience re-exports::

    from skinface.identity import normalize, SkinSource
    from skinface.server.app import create_app
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
