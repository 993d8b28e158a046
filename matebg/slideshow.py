"""Slideshow background descriptions: parsing, timing and size selection."""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass, field
from os import PathLike
from typing import Optional, Sequence, Union
from xml.parsers import expat

# Duration given to the only slide of a one-slide show: "never changes".
SINGLE_SLIDE_DURATION = float(2**32 - 1)

_ASCII_SPACE = " \t\n\r\f\v"
_FLOAT_RE = re.compile(r"[ \t\n\r\f\v]*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_HEX_RE = re.compile(r"[-+]?0[xX][0-9a-fA-F]+")
_OCT_RE = re.compile(r"[-+]?0[0-7]*")
_DEC_RE = re.compile(r"[-+]?\d+")


class SlideShowError(ValueError):
    """Raised when a file or text is not a usable slideshow description."""


@dataclass
class FileSize:
    """One image of a slide; width and height are -1 when not given."""

    width: int
    height: int
    file: Optional[str] = None


@dataclass
class Slide:
    """A static image or a transition between two images.

    ``file1`` holds the images shown (or faded from), ``file2`` the images
    faded to; both list alternative sizes, the last one declared first.
    """

    duration: float = 0.0
    fixed: bool = False
    file1: list[FileSize] = field(default_factory=list)
    file2: list[FileSize] = field(default_factory=list)

    def timeout(self) -> float:
        """Seconds until the picture should next be refreshed."""
        if self.fixed:
            return self.duration
        # 64 steps are enough for each one to be barely perceptible.
        return self.duration / 64.0


@dataclass
class SlideShow:
    slides: list[Slide]
    start_time: float
    total_duration: float
    has_multiple_sizes: bool = False

    def current_slide(self, now: float) -> tuple[Slide, float]:
        """Return the slide shown at time ``now`` and how far into it we are.

        The second value runs from 0.0 at the start of the slide towards 1.0.
        """
        try:
            delta = math.fmod(now - self.start_time, self.total_duration)
        except ValueError as exc:
            raise SlideShowError("slideshow has no duration") from exc
        if delta < 0:
            delta += self.total_duration

        elapsed = 0.0
        for slide in self.slides:
            if elapsed + slide.duration > delta:
                return slide, (delta - elapsed) / slide.duration
            elapsed += slide.duration
        raise SlideShowError("no slide covers the current time")

    def fixed_slide(self, frame_num: int) -> Slide:
        """Return the ``frame_num``-th static slide, counting from zero.

        Raises IndexError if there is no such slide.
        """
        if frame_num < 0 or frame_num >= len(self.slides):
            raise IndexError(f"frame {frame_num} out of range")
        fixed = [slide for slide in self.slides if slide.fixed]
        if frame_num >= len(fixed):
            raise IndexError(f"no static slide number {frame_num}")
        return fixed[frame_num]


def _strtol(text: str) -> int:
    """Leading integer of ``text`` with C base-0 prefixes; 0 if none."""
    stripped = text.lstrip(_ASCII_SPACE)
    match = _HEX_RE.match(stripped)
    if match:
        return int(match.group(0), 16)
    match = _OCT_RE.match(stripped)
    if match:
        return int(match.group(0), 8) if match.group(0).lstrip("+-") != "0" else 0
    match = _DEC_RE.match(stripped)
    return int(match.group(0)) if match else 0


def _atoi(text: str) -> int:
    match = _DEC_RE.match(text.lstrip(_ASCII_SPACE))
    return int(match.group(0)) if match else 0


def _strtod(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


_BG = "background"
_START_FIELDS = {
    (_BG, "starttime", "year"): 0,
    (_BG, "starttime", "month"): 1,
    (_BG, "starttime", "day"): 2,
    (_BG, "starttime", "hour"): 3,
    (_BG, "starttime", "minute"): 4,
    (_BG, "starttime", "second"): 5,
}
_HOUR_INDEX = 3
_DURATION_PATHS = {(_BG, "static", "duration"), (_BG, "transition", "duration")}
_FROM_PATHS = {(_BG, "static", "file"), (_BG, "transition", "from")}
_FROM_SIZE_PATHS = {(_BG, "static", "file", "size"), (_BG, "transition", "from", "size")}
_TO_PATH = (_BG, "transition", "to")
_TO_SIZE_PATH = (_BG, "transition", "to", "size")


class _Builder:
    def __init__(self) -> None:
        self.slides: list[Slide] = []
        self.stack: list[str] = []
        self.total_duration = 0.0
        self.has_multiple_sizes = False
        # Starts from the epoch in local time, as a struct_time field list.
        self.start = list(time.localtime(0))
        self._pending: list[str] = []

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        self._flush()
        if name in ("static", "transition"):
            self.slides.append(Slide(fixed=(name == "static")))
        elif name == "size":
            if not self.slides:
                raise SlideShowError("size element outside of a slide")
            slide = self.slides[-1]
            size = FileSize(
                width=_atoi(attrs.get("width", "0")),
                height=_atoi(attrs.get("height", "0")),
            )
            parent = self.stack[-1] if self.stack else None
            if parent in ("file", "from"):
                slide.file1.insert(0, size)
            elif parent == "to":
                slide.file2.insert(0, size)
        self.stack.append(name)

    def end_element(self, name: str) -> None:
        self._flush()
        self.stack.pop()

    def character_data(self, data: str) -> None:
        self._pending.append(data)

    def _flush(self) -> None:
        if self._pending:
            text = "".join(self._pending)
            self._pending.clear()
            self._handle_text(text)

    def _handle_text(self, text: str) -> None:
        path = tuple(self.stack)
        slide = self.slides[-1] if self.slides else None

        index = _START_FIELDS.get(path)
        if index is not None:
            value = _strtol(text)
            self.start[index] = value - 1 if index == _HOUR_INDEX else value
            return
        if slide is None:
            return

        if path in _DURATION_PATHS:
            slide.duration = _strtod(text)
            self.total_duration += slide.duration
        elif path in _FROM_PATHS:
            self._add_file(slide.file1, text)
        elif path in _FROM_SIZE_PATHS:
            self._name_size(slide.file1, text)
        elif path == _TO_PATH:
            self._add_file(slide.file2, text)
        elif path == _TO_SIZE_PATH:
            self._name_size(slide.file2, text)

    def _add_file(self, files: list[FileSize], text: str) -> None:
        if not text.strip(_ASCII_SPACE):
            return
        files.insert(0, FileSize(-1, -1, text))
        if len(files) > 1:
            self.has_multiple_sizes = True

    def _name_size(self, files: list[FileSize], text: str) -> None:
        if not files:
            return
        files[0].file = text
        if len(files) > 1:
            self.has_multiple_sizes = True

    def finish(self) -> SlideShow:
        if not self.slides:
            raise SlideShowError("no slides in slideshow")
        try:
            start_time = float(time.mktime(tuple(self.start)))
        except (OverflowError, ValueError) as exc:
            raise SlideShowError("start time out of range") from exc
        total = self.total_duration
        if len(self.slides) == 1:
            self.slides[0].duration = total = SINGLE_SLIDE_DURATION
        return SlideShow(
            slides=self.slides,
            start_time=start_time,
            total_duration=total,
            has_multiple_sizes=self.has_multiple_sizes,
        )


def parse_slideshow(text: Union[str, bytes]) -> SlideShow:
    """Parse an XML slideshow description.

    Raises SlideShowError if the text is not well-formed or has no slides.
    """
    builder = _Builder()
    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.StartElementHandler = builder.start_element
    parser.EndElementHandler = builder.end_element
    parser.CharacterDataHandler = builder.character_data
    try:
        parser.Parse(text, True)
    except expat.ExpatError as exc:
        raise SlideShowError(f"malformed slideshow: {exc}") from exc
    return builder.finish()


def read_slideshow_file(path: Union[str, PathLike]) -> SlideShow:
    """Read and parse a slideshow file; SlideShowError if it is not one."""
    try:
        with open(path, "rb") as handle:
            contents = handle.read()
    except OSError as exc:
        raise SlideShowError(f"cannot read {path}: {exc}") from exc
    return parse_slideshow(contents)


def _ratio(width: float, height: float) -> float:
    if height == 0:
        if width == 0:
            return math.nan
        return math.copysign(math.inf, width)
    return width / height


def find_best_size(sizes: Sequence[FileSize], width: int, height: int) -> Optional[FileSize]:
    """Pick the size whose aspect ratio best matches ``width`` x ``height``.

    Sizes at least as large as requested are tried first; ties go to the
    width closest to the request.  Returns None if nothing matches.
    """
    target = _ratio(width, height)
    distance = 10000.0
    best: Optional[FileSize] = None

    for only_larger in (True, False):
        for size in sizes:
            if only_larger and (size.width < width or size.height < height):
                continue
            d = abs(target - _ratio(size.width, size.height))
            if d < distance:
                distance = d
                best = size
            elif d == distance and best is not None:
                if abs(size.width - width) < abs(best.width - width):
                    best = size
        if best is not None:
            break
    return best