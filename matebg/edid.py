"""Decoding of the 128-byte EDID block that monitors report."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

EDID_HEADER = b"\x00\xff\xff\xff\xff\xff\xff\x00"
EDID_LENGTH = 128

_DESCRIPTOR_OFFSET = 0x36
_DESCRIPTOR_LENGTH = 18
_DESCRIPTOR_COUNT = 4


class EdidError(ValueError):
    """Raised when a block of bytes is not a valid EDID."""


class Interface(IntEnum):
    UNDEFINED = 0
    DVI = 1
    HDMI_A = 2
    HDMI_B = 3
    MDDI = 4
    DISPLAY_PORT = 5


class ColorType(IntEnum):
    UNDEFINED_COLOR = 0
    MONOCHROME = 1
    RGB = 2
    OTHER_COLOR = 3


class StereoType(IntEnum):
    NO_STEREO = 0
    FIELD_RIGHT = 1
    FIELD_LEFT = 2
    TWO_WAY_RIGHT_ON_EVEN = 3
    TWO_WAY_LEFT_ON_EVEN = 4
    FOUR_WAY_INTERLEAVED = 5
    SIDE_BY_SIDE = 6


@dataclass(frozen=True)
class Timing:
    """A video mode given by size and refresh rate; all zero when unused."""

    width: int
    height: int
    frequency: int


@dataclass(frozen=True)
class DigitalSync:
    composite: bool
    serrations: bool
    negative_vsync: bool
    negative_hsync: bool


@dataclass(frozen=True)
class AnalogSync:
    bipolar: bool
    serrations: bool
    sync_on_green: bool


@dataclass(frozen=True)
class DetailedTiming:
    pixel_clock: int
    h_addr: int
    h_blank: int
    h_sync: int
    h_front_porch: int
    v_addr: int
    v_blank: int
    v_sync: int
    v_front_porch: int
    width_mm: int
    height_mm: int
    right_border: int
    top_border: int
    interlaced: bool
    stereo: StereoType
    digital_sync: bool
    sync: Union[DigitalSync, AnalogSync]


@dataclass(frozen=True)
class DigitalConnector:
    bits_per_primary: int
    interface: Interface
    rgb444: bool
    ycrcb444: bool
    ycrcb422: bool


@dataclass(frozen=True)
class AnalogConnector:
    video_signal_level: float
    sync_signal_level: float
    total_signal_level: float
    blank_to_black: bool
    separate_hv_sync: bool
    composite_sync_on_h: bool
    composite_sync_on_green: bool
    serration_on_vsync: bool
    color_type: ColorType


@dataclass(frozen=True)
class MonitorInfo:
    """Everything decoded from an EDID block.

    Integer fields documented as "not specified" hold -1, float ones -1.0.
    """

    checksum: int
    manufacturer_code: str
    product_code: int
    serial_number: int
    production_week: int
    production_year: int
    model_year: int
    major_version: int
    minor_version: int
    is_digital: bool
    connector: Union[DigitalConnector, AnalogConnector]
    width_mm: int
    height_mm: int
    aspect_ratio: float
    gamma: float
    standby: bool
    suspend: bool
    active_off: bool
    srgb_is_standard: bool
    preferred_timing_includes_native: bool
    continuous_frequency: bool
    red_x: float
    red_y: float
    green_x: float
    green_y: float
    blue_x: float
    blue_y: float
    white_x: float
    white_y: float
    established: tuple[Timing, ...]
    standard: tuple[Timing, ...]
    detailed_timings: tuple[DetailedTiming, ...]
    dsc_serial_number: str
    dsc_product_name: str
    dsc_string: str

    @property
    def n_detailed_timings(self) -> int:
        return len(self.detailed_timings)


def _bit(value: int, bit: int) -> int:
    return (value >> bit) & 1


def _bits(value: int, begin: int, end: int) -> int:
    width = end - begin + 1
    mask = (1 << width) - 1 if width > 0 else 0
    return (value >> begin) & mask


_BIT_DEPTH = (-1, 6, 8, 10, 12, 14, 16, -1)

_SIGNAL_LEVELS = (
    (0.7, 0.3, 1.0),
    (0.714, 0.286, 1.0),
    (1.0, 0.4, 1.4),
    (0.7, 0.0, 0.7),
)

_ANALOG_COLOR_TYPES = (
    ColorType.MONOCHROME,
    ColorType.RGB,
    ColorType.OTHER_COLOR,
    ColorType.UNDEFINED_COLOR,
)

_ESTABLISHED = (
    (
        Timing(800, 600, 60),
        Timing(800, 600, 56),
        Timing(640, 480, 75),
        Timing(640, 480, 72),
        Timing(640, 480, 67),
        Timing(640, 480, 60),
        Timing(720, 400, 88),
        Timing(720, 400, 70),
    ),
    (
        Timing(1280, 1024, 75),
        Timing(1024, 768, 75),
        Timing(1024, 768, 70),
        Timing(1024, 768, 60),
        Timing(1024, 768, 87),
        Timing(832, 624, 75),
        Timing(800, 600, 75),
        Timing(800, 600, 72),
    ),
    (
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(0, 0, 0),
        Timing(1152, 870, 75),
    ),
)

_STEREO = (
    StereoType.NO_STEREO,
    StereoType.NO_STEREO,
    StereoType.FIELD_RIGHT,
    StereoType.FIELD_LEFT,
    StereoType.TWO_WAY_RIGHT_ON_EVEN,
    StereoType.TWO_WAY_LEFT_ON_EVEN,
    StereoType.FOUR_WAY_INTERLEAVED,
    StereoType.SIDE_BY_SIDE,
)


def _manufacturer_code(edid: bytes) -> str:
    letters = (
        _bits(edid[0x08], 2, 6),
        (_bits(edid[0x08], 0, 1) << 3) | _bits(edid[0x09], 5, 7),
        _bits(edid[0x09], 0, 4),
    )
    return "".join(chr(letter + ord("A") - 1) for letter in letters)


def _digital_connector(edid: bytes) -> DigitalConnector:
    interface_bits = _bits(edid[0x14], 0, 3)
    interface = Interface(interface_bits) if interface_bits <= 5 else Interface.UNDEFINED
    return DigitalConnector(
        bits_per_primary=_BIT_DEPTH[_bits(edid[0x14], 4, 6)],
        interface=interface,
        rgb444=True,
        ycrcb444=bool(_bit(edid[0x18], 3)),
        ycrcb422=bool(_bit(edid[0x18], 4)),
    )


def _analog_connector(edid: bytes) -> AnalogConnector:
    video, sync, total = _SIGNAL_LEVELS[_bits(edid[0x14], 5, 6)]
    return AnalogConnector(
        video_signal_level=video,
        sync_signal_level=sync,
        total_signal_level=total,
        blank_to_black=bool(_bit(edid[0x14], 4)),
        separate_hv_sync=bool(_bit(edid[0x14], 3)),
        composite_sync_on_h=bool(_bit(edid[0x14], 2)),
        composite_sync_on_green=bool(_bit(edid[0x14], 1)),
        serration_on_vsync=bool(_bit(edid[0x14], 0)),
        color_type=_ANALOG_COLOR_TYPES[_bits(edid[0x18], 3, 4)],
    )


def _screen_size(edid: bytes) -> tuple[int, int, float]:
    horizontal, vertical = edid[0x15], edid[0x16]
    if horizontal == 0 and vertical == 0:
        return -1, -1, -1.0
    if vertical == 0:
        return -1, -1, 100.0 / (horizontal + 99)
    if horizontal == 0:
        return -1, -1, 1 / (100.0 / (vertical + 99))
    # A physical size leaves the aspect ratio unset.
    return 10 * horizontal, 10 * vertical, 0.0


def _fraction(high: int, low: int) -> float:
    return (((high << 2) | low) & 0x3FF) / 1024.0


def _established_timings(edid: bytes) -> tuple[Timing, ...]:
    return tuple(
        timing
        for row, byte in zip(_ESTABLISHED, edid[0x23:0x26])
        for bit, timing in enumerate(row)
        if _bit(byte, bit) and timing.frequency != 0
    )


def _standard_timing(first: int, second: int) -> Timing:
    if first == 0x01 or second == 0x01:
        return Timing(0, 0, 0)
    width = 8 * (first + 31)
    aspect = _bits(second, 6, 7)
    if aspect == 0:
        height = (width // 16) * 10
    elif aspect == 1:
        height = (width // 4) * 3
    elif aspect == 2:
        height = (width // 5) * 4
    else:
        height = (width // 16) * 9
    return Timing(width, height, _bits(second, 0, 5) + 60)


def _standard_timings(edid: bytes) -> tuple[Timing, ...]:
    block = edid[0x26:0x36]
    return tuple(_standard_timing(block[i], block[i + 1]) for i in range(0, 16, 2))


def _lf_string(raw: bytes) -> str:
    chars = []
    for byte in raw:
        if byte == 0x0A:
            break
        chars.append(" " if byte == 0x00 else chr(byte))
    return "".join(chars)


def _detailed_timing(timing: bytes) -> DetailedTiming:
    flags = timing[0x11]
    digital_sync = bool(_bit(flags, 4))
    sync: Union[DigitalSync, AnalogSync]
    if digital_sync:
        composite = not _bit(flags, 3)
        sync = DigitalSync(
            composite=composite,
            serrations=bool(_bit(flags, 2)) if composite else False,
            negative_vsync=False if composite else not _bit(flags, 2),
            negative_hsync=not _bit(flags, 0),
        )
    else:
        sync = AnalogSync(
            bipolar=bool(_bit(flags, 3)),
            serrations=bool(_bit(flags, 2)),
            sync_on_green=not _bit(flags, 1),
        )

    return DetailedTiming(
        pixel_clock=(timing[0x00] | timing[0x01] << 8) * 10000,
        h_addr=timing[0x02] | ((timing[0x04] & 0xF0) << 4),
        h_blank=timing[0x03] | ((timing[0x04] & 0x0F) << 8),
        h_sync=timing[0x09] | _bits(timing[0x0B], 4, 5) << 8,
        h_front_porch=timing[0x08] | _bits(timing[0x0B], 6, 7) << 8,
        v_addr=timing[0x05] | ((timing[0x07] & 0xF0) << 4),
        v_blank=timing[0x06] | ((timing[0x07] & 0x0F) << 8),
        v_sync=_bits(timing[0x0A], 0, 3) | _bits(timing[0x0B], 0, 1) << 4,
        v_front_porch=_bits(timing[0x0A], 4, 7) | _bits(timing[0x0B], 2, 3) << 4,
        width_mm=timing[0x0C] | _bits(timing[0x0E], 4, 7) << 8,
        height_mm=timing[0x0D] | _bits(timing[0x0E], 0, 3) << 8,
        right_border=timing[0x0F],
        top_border=timing[0x10],
        interlaced=bool(_bit(flags, 7)),
        stereo=_STEREO[_bits(flags, 5, 6) << 1 | _bit(flags, 0)],
        digital_sync=digital_sync,
        sync=sync,
    )


def _descriptors(edid: bytes) -> tuple[tuple[DetailedTiming, ...], dict[str, str]]:
    timings = []
    strings = {"dsc_serial_number": "", "dsc_product_name": "", "dsc_string": ""}
    targets = {0xFC: "dsc_product_name", 0xFF: "dsc_serial_number", 0xFE: "dsc_string"}
    for index in range(_DESCRIPTOR_COUNT):
        start = _DESCRIPTOR_OFFSET + index * _DESCRIPTOR_LENGTH
        block = edid[start:start + _DESCRIPTOR_LENGTH]
        if block[0] == 0x00 and block[1] == 0x00:
            target = targets.get(block[3])
            if target is not None:
                strings[target] = _lf_string(block[5:18])
        else:
            timings.append(_detailed_timing(block))
    return tuple(timings), strings


def decode_edid(data: bytes) -> MonitorInfo:
    """Decode the base EDID block at the start of ``data``.

    Raises EdidError if there are fewer than 128 bytes or the header is wrong.
    """
    edid = bytes(data)
    if len(edid) < EDID_LENGTH:
        raise EdidError(f"EDID needs {EDID_LENGTH} bytes, got {len(edid)}")
    edid = edid[:EDID_LENGTH]
    if edid[:8] != EDID_HEADER:
        raise EdidError("missing EDID header")

    week_byte = edid[0x10]
    year = 1990 + edid[0x11]
    if week_byte == 0xFF:
        production_week, production_year, model_year = -1, -1, year
    else:
        production_week = -1 if week_byte == 0x00 else week_byte
        production_year, model_year = year, -1

    is_digital = bool(_bit(edid[0x14], 7))
    connector = _digital_connector(edid) if is_digital else _analog_connector(edid)
    width_mm, height_mm, aspect_ratio = _screen_size(edid)
    gamma = -1.0 if edid[0x17] == 0xFF else (edid[0x17] + 100.0) / 100.0
    features = edid[0x18]
    detailed, strings = _descriptors(edid)

    return MonitorInfo(
        checksum=sum(edid) & 0xFF,
        manufacturer_code=_manufacturer_code(edid),
        product_code=edid[0x0B] << 8 | edid[0x0A],
        serial_number=int.from_bytes(edid[0x0C:0x10], "little"),
        production_week=production_week,
        production_year=production_year,
        model_year=model_year,
        major_version=edid[0x12],
        minor_version=edid[0x13],
        is_digital=is_digital,
        connector=connector,
        width_mm=width_mm,
        height_mm=height_mm,
        aspect_ratio=aspect_ratio,
        gamma=gamma,
        standby=bool(_bit(features, 7)),
        suspend=bool(_bit(features, 6)),
        active_off=bool(_bit(features, 5)),
        srgb_is_standard=bool(_bit(features, 2)),
        preferred_timing_includes_native=bool(_bit(features, 1)),
        continuous_frequency=bool(_bit(features, 0)),
        red_x=_fraction(edid[0x1B], _bits(edid[0x19], 6, 7)),
        red_y=_fraction(edid[0x1C], _bits(edid[0x19], 5, 4)),
        green_x=_fraction(edid[0x1D], _bits(edid[0x19], 2, 3)),
        green_y=_fraction(edid[0x1E], _bits(edid[0x19], 0, 1)),
        blue_x=_fraction(edid[0x1F], _bits(edid[0x1A], 6, 7)),
        blue_y=_fraction(edid[0x20], _bits(edid[0x1A], 4, 5)),
        white_x=_fraction(edid[0x21], _bits(edid[0x1A], 2, 3)),
        white_y=_fraction(edid[0x22], _bits(edid[0x1A], 0, 1)),
        established=_established_timings(edid),
        standard=_standard_timings(edid),
        detailed_timings=detailed,
        **strings,
    )