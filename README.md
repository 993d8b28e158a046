# matebg

Building blocks for drawing a desktop background and naming the monitors it is
shown on.

## Modules

- `matebg.colors`: the `Color` dataclass (red, green, blue, alpha in 0.0–1.0).
  `parse_color` reads `#rgb`, `#rrggbb`, `#rrrgggbbb` and `#rrrrggggbbbb` hex,
  `rgb(...)`, `rgba(...)` and colour names, and raises `ValueError` on anything
  else. `color_from_string` falls back to black for empty or invalid text.
  `color_to_string` formats a colour as `#rrggbb`.
- `matebg.imageops`: operations on Pillow images. `Rect` with `intersection`.
  `scale_to_fit`, `scale_to_min` (cover and crop centred), `clip_to_fit`,
  `fit_factor`, `create_gradient` and `draw_gradient` (horizontal or vertical, in
  place), `composite` (draw part of one image over another with an opacity),
  `tile`, `blend_images` and `average_value` (alpha-weighted mean colour).
- `matebg.slideshow`: XML background slideshows made of `<static>` and
  `<transition>` slides, with an optional `<starttime>` and alternative `<size>`
  images. `parse_slideshow` and `read_slideshow_file` return a `SlideShow`, and
  raise `SlideShowError` for malformed input or a show without slides.
  `SlideShow.current_slide(now)` gives the slide shown at a time and how far into
  it the show is. `SlideShow.fixed_slide(n)` gives the n-th static slide.
  `Slide.timeout()` tells how soon the picture should be refreshed.
  `find_best_size` picks the image whose aspect ratio best fits a screen.
- `matebg.edid`: `decode_edid` decodes a 128-byte EDID block into a frozen
  `MonitorInfo`. That covers the vendor code, product and serial numbers,
  production date, version, digital or analog connector, screen size, gamma,
  chromaticity, established, standard and detailed timings, and the descriptor
  strings. It raises `EdidError` when the data is too short or lacks the header.
- `matebg.display_name`: `make_display_name` turns a `MonitorInfo` into a name
  such as `DELL 24"`. `find_vendor` looks a code up in an optional PNP id mapping
  and then in a built-in table. `read_pnp_ids` reads a tab-separated PNP id file.

## Installation

```
pip install matebg
```

For the tests:

```
pip install "matebg[test]"
pytest
```

## Examples

A vertical gradient:

```python
from PIL import Image
from matebg.colors import parse_color
from matebg.imageops import Rect, draw_gradient, average_value

canvas = Image.new("RGB", (640, 480))
draw_gradient(canvas, False, parse_color("#203040"), parse_color("#a0b0c0"),
              Rect(0, 0, 640, 480))
print(average_value(canvas))
```

The slide shown now:

```python
import time
from matebg.slideshow import parse_slideshow

show = parse_slideshow("""
<background>
  <static><duration>60</duration><file>/pictures/a.png</file></static>
  <transition><duration>5</duration>
    <from>/pictures/a.png</from><to>/pictures/b.png</to>
  </transition>
</background>
""")
slide, progress = show.current_slide(time.time())
print(slide.fixed, progress)
```

Naming a monitor:

```python
from matebg.edid import decode_edid, EdidError
from matebg.display_name import make_display_name, read_pnp_ids

with open("/sys/class/drm/card0-HDMI-A-1/edid", "rb") as fh:
    info = decode_edid(fh.read())
print(make_display_name(info, read_pnp_ids("/usr/share/hwdata/pnp.ids")))
```

## What it does not do

The package has no background object that ties these pieces together. It does
not keep the current wallpaper, placement and shading as state, and does not
load or save them from a settings store. It does not draw a wallpaper per monitor
or spanned, cache loaded images on disk, or send change notifications. It also
sets no root window or desktop background. Those steps are left to the caller,
who can build them from the functions above.