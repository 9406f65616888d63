"""Image format conversion with Pillow and libvips backends."""

__version__ = "1.0.0"
