"""magickfx: single-effect image animations built on ImageMagick."""

__version__ = "0.1.0"
