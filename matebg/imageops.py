"""Pixel operations on Pillow images used to compose backgrounds."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from matebg.colors import Color


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersection(self, other: "Rect") -> "Rect":
        """Return the overlap of two rectangles; an empty one if disjoint."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.x + self.width, other.x + other.width)
        bottom = min(self.y + self.height, other.y + other.height)
        if right <= left or bottom <= top:
            return Rect(left, top, 0, 0)
        return Rect(left, top, right - left, bottom - top)


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _normalized(image: Image.Image) -> Image.Image:
    mode = "RGBA" if _has_alpha(image) else "RGB"
    return image if image.mode == mode else image.convert(mode)


def average_value(image: Image.Image) -> Color:
    """Average colour of an image, weighting colours by their alpha.

    Raises ValueError for an image without pixels.
    """
    width, height = image.size
    count = width * height
    if count == 0:
        raise ValueError("cannot average an empty image")
    pixels = _normalized(image)

    if pixels.mode == "RGBA":
        a_total = r_total = g_total = b_total = 0
        for r, g, b, a in pixels.getdata():
            a_total += a
            r_total += r * a
            g_total += g * a
            b_total += b * a
        dividend = count * 0xFF
        a_total *= 0xFF
    else:
        r_total = g_total = b_total = 0
        for r, g, b in pixels.getdata():
            r_total += r
            g_total += g
            b_total += b
        dividend = count
        a_total = dividend * 0xFF

    dd = float(dividend * 0xFF)
    return Color(r_total / dd, g_total / dd, b_total / dd, a_total / dd)


def fit_factor(from_width: int, from_height: int, to_width: int, to_height: int) -> float:
    """Largest scale factor that fits the first size inside the second."""
    return min(to_width / float(from_width), to_height / float(from_height))


def scale_to_fit(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Scale keeping the aspect ratio so the image fits inside the bounds.

    Raises ValueError if the result would have no pixels.
    """
    src = _normalized(image)
    factor = fit_factor(src.width, src.height, max_width, max_height)
    new_width = int(math.floor(src.width * factor + 0.5))
    new_height = int(math.floor(src.height * factor + 0.5))
    if new_width <= 0 or new_height <= 0:
        raise ValueError("scaled image would be empty")
    return src.resize((new_width, new_height), Image.BILINEAR)


def scale_to_min(image: Image.Image, min_width: int, min_height: int) -> Image.Image:
    """Scale keeping the aspect ratio to cover the bounds, then crop centred.

    The result is exactly ``min_width`` x ``min_height``.
    """
    if min_width <= 0 or min_height <= 0:
        raise ValueError("target size must be positive")
    src = _normalized(image)
    factor = max(min_width / float(src.width), min_height / float(src.height))
    new_width = int(math.floor(src.width * factor + 0.5))
    new_height = int(math.floor(src.height * factor + 0.5))
    scaled = src.resize((new_width, new_height), Image.BILINEAR)
    left = int((new_width - min_width) / 2)
    top = int((new_height - min_height) / 2)
    return scaled.crop((left, top, left + min_width, top + min_height))


def clip_to_fit(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Crop the centre of an image so it is no larger than the bounds."""
    src = _normalized(image)
    if src.width < max_width and src.height < max_height:
        return src.copy()
    width = min(src.width, max_width)
    height = min(src.height, max_height)
    left = (src.width - width) // 2
    top = (src.height - height) // 2
    return src.crop((left, top, left + width, top + height))


def _gradient_byte(value: float) -> int:
    return min(max(int(value), 0), 0xFF)


def create_gradient(primary: Color, secondary: Color, n_pixels: int) -> bytes:
    """RGB bytes for ``n_pixels`` sampled evenly from primary to secondary."""
    result = bytearray()
    for i in range(max(n_pixels, 0)):
        ratio = (i + 0.5) / n_pixels
        for first, second in (
            (primary.red, secondary.red),
            (primary.green, secondary.green),
            (primary.blue, secondary.blue),
        ):
            result.append(_gradient_byte((first * (1 - ratio) + second * ratio) * 0x100))
    return bytes(result)


def draw_gradient(
    image: Image.Image,
    horizontal: bool,
    primary: Color,
    secondary: Color,
    rect: Rect,
) -> None:
    """Paint a gradient into ``rect`` of ``image`` in place.

    Raises ValueError if the rectangle reaches outside the image.
    """
    if rect.is_empty:
        return
    if (
        rect.x < 0
        or rect.y < 0
        or rect.x + rect.width > image.width
        or rect.y + rect.height > image.height
    ):
        raise ValueError("rectangle lies outside the image")

    size = (rect.width, rect.height)
    if horizontal:
        gradient = create_gradient(primary, secondary, rect.width)
        strip = Image.frombytes("RGB", (rect.width, 1), gradient)
    else:
        gradient = create_gradient(primary, secondary, rect.height)
        strip = Image.frombytes("RGB", (1, rect.height), gradient)
    fill = strip.resize(size, Image.NEAREST)
    if fill.mode != image.mode:
        fill = fill.convert(image.mode)
    image.paste(fill, (rect.x, rect.y))


def composite(
    src: Image.Image,
    dest: Image.Image,
    src_x: int,
    src_y: int,
    src_width: int,
    src_height: int,
    dest_x: int,
    dest_y: int,
    alpha: float,
) -> None:
    """Draw part of ``src`` over ``dest`` in place with an overall opacity.

    A negative width or height means the whole of ``src``.  The area is
    clipped to the right and bottom edges of ``dest``.
    """
    dest_width, dest_height = dest.size
    offset_x = dest_x - src_x
    offset_y = dest_y - src_y

    if src_width < 0:
        src_width = src.width
    if src_height < 0:
        src_height = src.height
    dest_x = max(dest_x, 0)
    dest_y = max(dest_y, 0)
    if dest_x + src_width > dest_width:
        src_width = dest_width - dest_x
    if dest_y + src_height > dest_height:
        src_height = dest_height - dest_y
    if src_width <= 0 or src_height <= 0:
        return

    overall = min(max(int(alpha * 0xFF + 0.5), 0), 0xFF)
    left = dest_x - offset_x
    top = dest_y - offset_y
    region = _normalized(src).crop((left, top, left + src_width, top + src_height))

    mask: Optional[Image.Image]
    if region.mode == "RGBA":
        mask = region.getchannel("A")
        if overall < 0xFF:
            mask = mask.point(lambda value: value * overall // 0xFF)
    elif overall < 0xFF:
        mask = Image.new("L", region.size, overall)
    else:
        mask = None

    pixels = region if region.mode == dest.mode else region.convert(dest.mode)
    dest.paste(pixels, (dest_x, dest_y), mask)


def tile(src: Image.Image, dest: Image.Image) -> None:
    """Repeat ``src`` over the whole of ``dest`` in place."""
    tile_width, tile_height = src.size
    if tile_width <= 0 or tile_height <= 0:
        raise ValueError("cannot tile an empty image")
    for y in range(0, dest.height, tile_height):
        for x in range(0, dest.width, tile_width):
            composite(src, dest, 0, 0, tile_width, tile_height, x, y, 1.0)


def blend_images(first: Image.Image, second: Image.Image, alpha: float) -> Image.Image:
    """Return ``first`` with ``second`` drawn over it at opacity ``alpha``.

    ``second`` is scaled to the size of ``first`` when they differ.
    """
    result = _normalized(first).copy()
    if second.size != result.size:
        overlay = _normalized(second).resize(result.size, Image.BILINEAR)
    else:
        overlay = second
    composite(overlay, result, 0, 0, -1, -1, 0, 0, alpha)
    return result