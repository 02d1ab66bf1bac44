"""IceCanary: build Minecraft resource packs from a declarative build file."""

__version__ = "1.0.0"

__all__ = ["__version__"]
