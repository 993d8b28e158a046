"""Desktop background building blocks: colours, image operations, slideshows and EDID decoding."""

__version__ = "0.1.0"

__all__ = [
    "colors",
    "display_name",
    "edid",
    "imageops",
    "slideshow",
]