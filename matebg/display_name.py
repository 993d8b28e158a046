"""Human readable monitor names built from decoded EDID data."""

from __future__ import annotations

import math
from collections.abc import Mapping
from os import PathLike
from typing import Optional, Union

from matebg.edid import MonitorInfo

UNKNOWN_VENDOR = "Unknown"

# Fallback vendor table, consulted after the PNP id database.  Where a code
# appears twice the first entry wins.
_VENDORS: tuple[tuple[str, str], ...] = (
    ("AIC", "AG Neovo"),
    ("ACR", "Acer"),
    ("DEL", "DELL"),
    ("SAM", "SAMSUNG"),
    ("SNY", "SONY"),
    ("SEC", "Epson"),
    ("WAC", "Wacom"),
    ("NEC", "NEC"),
    ("CMO", "CMO"),
    ("BNQ", "BenQ"),
    ("ABP", "Advansys"),
    ("ACC", "Accton"),
    ("ACE", "Accton"),
    ("ADP", "Adaptec"),
    ("ADV", "AMD"),
    ("AIR", "AIR"),
    ("AMI", "AMI"),
    ("ASU", "ASUS"),
    ("ATI", "ATI"),
    ("ATK", "Allied Telesyn"),
    ("AZT", "Aztech"),
    ("BAN", "Banya"),
    ("BRI", "Boca Research"),
    ("BUS", "Buslogic"),
    ("CCI", "Cache Computers Inc."),
    ("CHA", "Chase"),
    ("CMD", "CMD Technology, Inc."),
    ("COG", "Cogent"),
    ("CPQ", "Compaq"),
    ("CRS", "Crescendo"),
    ("CSC", "Crystal"),
    ("CSI", "CSI"),
    ("CTL", "Creative Labs"),
    ("DBI", "Digi"),
    ("DEC", "Digital Equipment"),
    ("DBK", "Databook"),
    ("EGL", "Eagle Technology"),
    ("ELS", "ELSA"),
    ("ESS", "ESS"),
    ("FAR", "Farallon"),
    ("FDC", "Future Domain"),
    ("HWP", "Hewlett-Packard"),
    ("IBM", "IBM"),
    ("INT", "Intel"),
    ("ISA", "Iomega"),
    ("LEN", "Lenovo"),
    ("MDG", "Madge"),
    ("MDY", "Microdyne"),
    ("MET", "Metheus"),
    ("MIC", "Micronics"),
    ("MLX", "Mylex"),
    ("NVL", "Novell"),
    ("OLC", "Olicom"),
    ("PRO", "Proteon"),
    ("RII", "Racal"),
    ("RTL", "Realtek"),
    ("SCM", "SCM"),
    ("SKD", "SysKonnect"),
    ("SGI", "SGI"),
    ("SMC", "SMC"),
    ("SNI", "Siemens Nixdorf"),
    ("STL", "Stallion Technologies"),
    ("SUN", "Sun"),
    ("SUP", "SupraExpress"),
    ("SVE", "SVEC"),
    ("TCC", "Thomas-Conrad"),
    ("TCI", "Tulip"),
    ("TCM", "3Com"),
    ("TCO", "Thomas-Conrad"),
    ("TEC", "Tecmar"),
    ("TRU", "Truevision"),
    ("TOS", "Toshiba"),
    ("TYN", "Tyan"),
    ("UBI", "Ungermann-Bass"),
    ("USC", "UltraStor"),
    ("VDM", "Vadem"),
    ("VMI", "Vermont"),
    ("WDC", "Western Digital"),
    ("ZDS", "Zeos"),
    ("ACT", "Targa"),
    ("ADI", "ADI"),
    ("AOC", "AOC Intl"),
    ("API", "Acer America"),
    ("APP", "Apple Computer"),
    ("ART", "ArtMedia"),
    ("AST", "AST Research"),
    ("CPL", "Compal"),
    ("CTX", "Chuntex Electronic Co."),
    ("DPC", "Delta Electronics"),
    ("DWE", "Daewoo"),
    ("ECS", "ELITEGROUP"),
    ("EIZ", "EIZO"),
    ("FCM", "Funai"),
    ("GSM", "LG Electronics"),
    ("GWY", "Gateway 2000"),
    ("HEI", "Hyundai"),
    ("HIT", "Hitachi"),
    ("HSL", "Hansol"),
    ("HTC", "Hitachi"),
    ("ICL", "Fujitsu ICL"),
    ("IVM", "Idek Iiyama"),
    ("KFC", "KFC Computek"),
    ("LKM", "ADLAS"),
    ("LNK", "LINK Tech"),
    ("LTN", "Lite-On"),
    ("MAG", "MAG InnoVision"),
    ("MAX", "Maxdata"),
    ("MEI", "Panasonic"),
    ("MEL", "Mitsubishi"),
    ("MIR", "miro"),
    ("MTC", "MITAC"),
    ("NAN", "NANAO"),
    ("NEC", "NEC Tech"),
    ("NOK", "Nokia"),
    ("OQI", "OPTIQUEST"),
    ("PBN", "Packard Bell"),
    ("PGS", "Princeton"),
    ("PHL", "Philips"),
    ("REL", "Relisys"),
    ("SDI", "Samtron"),
    ("SMI", "Smile"),
    ("SPT", "Sceptre"),
    ("SRC", "Shamrock Technology"),
    ("STP", "Sceptre"),
    ("TAT", "Tatung"),
    ("TRL", "Royal Information Company"),
    ("TSB", "Toshiba, Inc."),
    ("UNM", "Unisys"),
    ("VSC", "ViewSonic"),
    ("WTC", "Wen Tech"),
    ("ZCM", "Zenith Data Systems"),
    ("???", "Unknown"),
)

_BUILTIN_VENDORS: dict[str, str] = {}
for _code, _name in _VENDORS:
    _BUILTIN_VENDORS.setdefault(_code, _name)


def read_pnp_ids(path: Union[str, PathLike]) -> dict[str, str]:
    """Read a PNP id database: lines of a 3-character code, a tab, a name.

    Lines of any other shape are ignored; an unreadable file gives an
    empty mapping.  A code listed more than once keeps its last name.
    """
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            contents = handle.read()
    except OSError:
        return {}

    ids: dict[str, str] = {}
    for line in contents.split("\n"):
        if len(line) >= 5 and "\t" not in line[:3] and line[3] == "\t":
            ids[line[:3]] = line[4:]
    return ids


def find_vendor(code: str, pnp_ids: Optional[Mapping[str, str]] = None) -> str:
    """Return the vendor name for a manufacturer code, or the code itself."""
    if pnp_ids:
        name = pnp_ids.get(code)
        if name:
            return name
    return _BUILTIN_VENDORS.get(code, code)


def make_display_name(
    info: Optional[MonitorInfo], pnp_ids: Optional[Mapping[str, str]] = None
) -> str:
    """Build a name such as 'DELL 24"' for a monitor.

    The diagonal comes from the screen size, or failing that from the first
    detailed timing; without either only the vendor is given.
    """
    if info is None:
        vendor = UNKNOWN_VENDOR
    else:
        vendor = find_vendor(info.manufacturer_code, pnp_ids)

    if info is not None and info.width_mm != -1 and info.height_mm:
        width_mm, height_mm = info.width_mm, info.height_mm
    elif info is not None and info.detailed_timings:
        first = info.detailed_timings[0]
        width_mm, height_mm = first.width_mm, first.height_mm
    else:
        width_mm, height_mm = -1, -1

    inches = -1
    if width_mm != -1 and height_mm != -1:
        diagonal = math.sqrt(width_mm * width_mm + height_mm * height_mm)
        inches = int(diagonal / 25.4 + 0.5)

    if inches > 0:
        return f'{vendor} {inches}"'
    return vendor