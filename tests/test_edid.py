import pytest

from matebg.edid import (
    AnalogConnector,
    AnalogSync,
    ColorType,
    DigitalConnector,
    DigitalSync,
    EdidError,
    Interface,
    StereoType,
    Timing,
    decode_edid,
)

HEADER = b"\x00\xff\xff\xff\xff\xff\xff\x00"
DTD_1080P = bytes(
    [0x02, 0x3A, 0x80, 0x18, 0x71, 0x38, 0x2D, 0x40, 0x58,
     0x2C, 0x45, 0x00, 0x09, 0x25, 0x21, 0x00, 0x00, 0x1E]
)


def make_edid():
    data = bytearray(128)
    data[0:8] = HEADER
    data[0x26:0x36] = b"\x01" * 16
    for index in range(4):
        start = 0x36 + index * 18
        data[start + 3] = 0x10
    return data


def set_descriptor(data, index, block):
    start = 0x36 + index * 18
    data[start:start + 18] = block


def text_descriptor(tag, text):
    block = bytearray(18)
    block[3] = tag
    block[5:5 + len(text)] = text
    return bytes(block)


def test_bad_header_raises():
    data = make_edid()
    data[0] = 0x01
    with pytest.raises(EdidError):
        decode_edid(bytes(data))


def test_short_data_raises():
    with pytest.raises(EdidError):
        decode_edid(bytes(make_edid())[:100])


def test_extension_bytes_are_ignored():
    data = make_edid()
    assert decode_edid(bytes(data) + b"\x55" * 128) == decode_edid(bytes(data))


@pytest.mark.parametrize(
    "first, second, code",
    [(0x10, 0xAC, "DEL"), (0x4C, 0x2D, "SAM")],
)
def test_manufacturer_code(first, second, code):
    data = make_edid()
    data[0x08], data[0x09] = first, second
    assert decode_edid(data).manufacturer_code == code


def test_product_and_serial_round_trip():
    data = make_edid()
    data[0x0A:0x0C] = (0x1234).to_bytes(2, "little")
    data[0x0C:0x10] = (0xDEADBEEF).to_bytes(4, "little")
    info = decode_edid(data)
    assert info.product_code == 0x1234
    assert info.serial_number == 0xDEADBEEF


def test_production_week_and_year():
    data = make_edid()
    data[0x10], data[0x11] = 12, 30
    info = decode_edid(data)
    assert info.production_week == 12
    assert info.production_year == 1990 + 30
    assert info.model_year == -1


def test_unknown_week():
    data = make_edid()
    data[0x10], data[0x11] = 0, 5
    info = decode_edid(data)
    assert info.production_week == -1
    assert info.production_year == 1990 + 5


def test_model_year():
    data = make_edid()
    data[0x10], data[0x11] = 0xFF, 25
    info = decode_edid(data)
    assert info.production_week == -1
    assert info.production_year == -1
    assert info.model_year == 1990 + 25


def test_version():
    data = make_edid()
    data[0x12], data[0x13] = 1, 4
    info = decode_edid(data)
    assert (info.major_version, info.minor_version) == (1, 4)


def test_digital_connector():
    data = make_edid()
    data[0x14] = 0x80 | (2 << 4) | 5
    data[0x18] = 0x08
    info = decode_edid(data)
    assert info.is_digital
    assert info.connector == DigitalConnector(
        bits_per_primary=8,
        interface=Interface.DISPLAY_PORT,
        rgb444=True,
        ycrcb444=True,
        ycrcb422=False,
    )


def test_digital_unknown_interface_and_depth():
    data = make_edid()
    data[0x14] = 0x80 | (7 << 4) | 7
    connector = decode_edid(data).connector
    assert connector.interface is Interface.UNDEFINED
    assert connector.bits_per_primary == -1


def test_analog_connector():
    data = make_edid()
    data[0x14] = (1 << 5) | 0x10 | 0x02
    data[0x18] = 1 << 3
    info = decode_edid(data)
    assert not info.is_digital
    assert info.connector == AnalogConnector(
        video_signal_level=0.714,
        sync_signal_level=0.286,
        total_signal_level=1.0,
        blank_to_black=True,
        separate_hv_sync=False,
        composite_sync_on_h=False,
        composite_sync_on_green=True,
        serration_on_vsync=False,
        color_type=ColorType.RGB,
    )


def test_analog_undefined_color_type():
    data = make_edid()
    data[0x18] = 3 << 3
    assert decode_edid(data).connector.color_type is ColorType.UNDEFINED_COLOR


def test_screen_size_in_centimetres():
    data = make_edid()
    data[0x15], data[0x16] = 52, 29
    info = decode_edid(data)
    assert (info.width_mm, info.height_mm) == (10 * 52, 10 * 29)


def test_screen_size_unspecified():
    info = decode_edid(make_edid())
    assert (info.width_mm, info.height_mm, info.aspect_ratio) == (-1, -1, -1.0)


def test_landscape_and_portrait_ratios_are_reciprocal():
    landscape = make_edid()
    landscape[0x15] = 79
    portrait = make_edid()
    portrait[0x16] = 79
    first = decode_edid(landscape)
    second = decode_edid(portrait)
    assert first.width_mm == -1 and second.height_mm == -1
    assert first.aspect_ratio * second.aspect_ratio == pytest.approx(1.0)


def test_gamma():
    data = make_edid()
    data[0x17] = 120
    assert decode_edid(data).gamma == pytest.approx(2.2)
    data[0x17] = 0xFF
    assert decode_edid(data).gamma == -1.0


def test_feature_flags():
    data = make_edid()
    data[0x18] = 0b1010_0101
    info = decode_edid(data)
    assert info.standby and not info.suspend and info.active_off
    assert info.srgb_is_standard
    assert not info.preferred_timing_includes_native
    assert info.continuous_frequency


def test_chromaticity_range_and_zero():
    zero = decode_edid(make_edid())
    assert zero.red_x == 0.0 and zero.white_y == 0.0
    data = make_edid()
    data[0x19:0x23] = b"\xff" * 10
    info = decode_edid(data)
    values = [info.red_x, info.red_y, info.green_x, info.green_y,
              info.blue_x, info.blue_y, info.white_x, info.white_y]
    assert all(0.0 < value < 1.0 for value in values)
    assert info.red_x > info.red_y


def test_red_y_ignores_low_bits():
    first = make_edid()
    first[0x1C] = 0x80
    second = bytearray(first)
    second[0x19] = 0x30
    assert decode_edid(first).red_y == decode_edid(second).red_y


def test_established_timings():
    data = make_edid()
    data[0x23] = 0x01
    assert decode_edid(data).established == (Timing(800, 600, 60),)
    data = make_edid()
    data[0x25] = 0xFF
    assert decode_edid(data).established == (Timing(1152, 870, 75),)
    data[0x23:0x26] = b"\xff\xff\xff"
    assert len(decode_edid(data).established) == 17


def test_standard_timings():
    data = make_edid()
    data[0x26], data[0x27] = 0xD1, 0xC0
    standard = decode_edid(data).standard
    assert len(standard) == 8
    assert standard[0] == Timing(1920, 1080, 60)
    assert all(timing == Timing(0, 0, 0) for timing in standard[1:])


def test_text_descriptors():
    data = make_edid()
    set_descriptor(data, 0, text_descriptor(0xFC, b"TESTMON\n     "))
    set_descriptor(data, 1, text_descriptor(0xFF, b"ABC123\n"))
    set_descriptor(data, 2, text_descriptor(0xFE, b"ABCDEFGHIJKLM"))
    info = decode_edid(data)
    assert info.dsc_product_name == "TESTMON"
    assert info.dsc_serial_number == "ABC123"
    assert info.dsc_string == "ABCDEFGHIJKLM"
    assert info.n_detailed_timings == 0


def test_embedded_zero_becomes_space():
    data = make_edid()
    set_descriptor(data, 0, text_descriptor(0xFC, b"AB\x00CD\n"))
    assert decode_edid(data).dsc_product_name == "AB CD"


def test_detailed_timing_1080p():
    data = make_edid()
    set_descriptor(data, 0, DTD_1080P)
    info = decode_edid(data)
    assert info.n_detailed_timings == 1
    timing = info.detailed_timings[0]
    assert timing.h_addr == 1920
    assert timing.v_addr == 1080
    assert timing.pixel_clock == 148500000
    assert not timing.interlaced
    assert timing.stereo is StereoType.NO_STEREO
    assert timing.digital_sync
    assert timing.sync == DigitalSync(
        composite=False, serrations=False, negative_vsync=False, negative_hsync=True
    )


@pytest.mark.parametrize(
    "flags, stereo",
    [
        ((3 << 5) | 0x01, StereoType.SIDE_BY_SIDE),
        (1 << 5, StereoType.FIELD_RIGHT),
        (0x01, StereoType.NO_STEREO),
    ],
)
def test_stereo_modes(flags, stereo):
    block = bytearray(DTD_1080P)
    block[0x11] = flags
    data = make_edid()
    set_descriptor(data, 0, bytes(block))
    assert decode_edid(data).detailed_timings[0].stereo is stereo


def test_analog_sync():
    block = bytearray(DTD_1080P)
    block[0x11] = 0x08
    data = make_edid()
    set_descriptor(data, 0, bytes(block))
    timing = decode_edid(data).detailed_timings[0]
    assert not timing.digital_sync
    assert timing.sync == AnalogSync(bipolar=True, serrations=False, sync_on_green=True)


def test_timings_keep_order_across_descriptors():
    second = bytearray(DTD_1080P)
    second[0x02] = 0x00
    data = make_edid()
    set_descriptor(data, 0, DTD_1080P)
    set_descriptor(data, 1, text_descriptor(0xFC, b"X\n"))
    set_descriptor(data, 3, bytes(second))
    info = decode_edid(data)
    assert info.n_detailed_timings == 2
    assert info.detailed_timings[0].h_addr == 1920
    assert info.detailed_timings[1].h_addr < info.detailed_timings[0].h_addr
    assert info.dsc_product_name == "X"


def test_checksum():
    data = make_edid()
    data[0x12] = 1
    data[127] = (-sum(data[:127])) % 256
    assert decode_edid(data).checksum == 0
    data[0x13] += 1
    assert decode_edid(data).checksum == 1