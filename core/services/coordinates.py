"""GPS coordinate conversion from degrees/minutes/seconds to decimal degrees."""

from __future__ import annotations

import re

from core.errors import CoordinateFormatError
from core.models import FileMetadataRecord, GPSFix

CARDINALS = ("N", "S", "E", "W")
NEGATIVE_CARDINALS = ("S", "W")
LONGITUDE_FIRST = ("E", "W")

GPS_CATEGORY = "EXIF"
LATITUDE_LABEL = "GPS Latitude"
LATITUDE_REF_LABEL = "GPS Latitude Ref"
LONGITUDE_LABEL = "GPS Longitude"
LONGITUDE_REF_LABEL = "GPS Longitude Ref"

MAP_ZOOM = 8
MAP_URI_TEMPLATE = "https://www.openstreetmap.org/?mlat={lat}&mlon={lon}&zoom={zoom}"

_SEPARATORS = re.compile(r"(?:deg|[°'\"]|\s)+")
_NUMBER = re.compile(r"[+-]?\d+(?:\.\d+)?")


def to_decimal_degrees(text: str) -> list[float] | list[str]:
    """Convert a DMS position into ``[latitude, longitude]``.

    ``"40 deg 26' 46\\" N 79 deg 58' 56\\" W"`` becomes roughly
    ``[40.4461, -79.9822]``. Each group accumulates ``value / 60**k`` over its
    numeric tokens and is closed by a direction letter, which may be fused to a
    trailing number (``46.00N``). Input starting with a longitude is swapped.

    Input without any direction letter is already decimal and is returned as
    its verbatim comma split.

    Raises:
        CoordinateFormatError: unless exactly two direction-terminated groups
            are found.
    """
    if not any(cardinal in text for cardinal in CARDINALS):
        return text.split(",")

    directions: list[str] = []
    coords: list[float] = []
    value = 0.0
    power = 0

    for token in _SEPARATORS.split(text):
        if not token:
            continue
        if _NUMBER.fullmatch(token):
            value += float(token) / 60**power
            power += 1
            continue

        fused = _NUMBER.match(token)
        if fused:
            value += float(fused.group()) / 60**power
            token = token[fused.end() :]

        direction = token[0]
        if direction not in CARDINALS:
            raise CoordinateFormatError(f"Unexpected token {token!r} in {text!r}")
        if direction in NEGATIVE_CARDINALS:
            value = -value

        directions.append(direction)
        coords.append(value)
        value = 0.0
        power = 0

    if power:
        raise CoordinateFormatError(f"Trailing numbers without a direction in {text!r}")
    if len(coords) != 2:
        raise CoordinateFormatError(
            f"Expected 2 coordinate groups, found {len(coords)} in {text!r}"
        )

    if directions[0] in LONGITUDE_FIRST:
        coords[0], coords[1] = coords[1], coords[0]
    return coords


def _signed(value: float, ref: str | None) -> float:
    return -abs(value) if ref in NEGATIVE_CARDINALS else value


def gps_fix_from_record(record: FileMetadataRecord) -> GPSFix | None:
    """Build a `GPSFix` from the GPS tags of the EXIF category, if present."""
    latitude = record.value_of(GPS_CATEGORY, LATITUDE_LABEL)
    longitude = record.value_of(GPS_CATEGORY, LONGITUDE_LABEL)
    if latitude is None or longitude is None:
        return None

    lat_ref = record.value_of(GPS_CATEGORY, LATITUDE_REF_LABEL)
    lon_ref = record.value_of(GPS_CATEGORY, LONGITUDE_REF_LABEL)
    lat_ref = str(lat_ref)[:1] if lat_ref else None
    lon_ref = str(lon_ref)[:1] if lon_ref else None

    if isinstance(latitude, (int, float)) and isinstance(longitude, (int, float)):
        return GPSFix(_signed(float(latitude), lat_ref), _signed(float(longitude), lon_ref))

    text = " ".join(
        str(part) for part in (latitude, lat_ref, longitude, lon_ref) if part is not None
    )
    coords = to_decimal_degrees(text)
    try:
        return GPSFix(float(coords[0]), float(coords[1]))
    except (IndexError, ValueError) as ex:
        raise CoordinateFormatError(f"Cannot read a position from {text!r}") from ex


def build_map_uri(fix: GPSFix, zoom: int = MAP_ZOOM) -> str:
    """OpenStreetMap URI centred on `fix`."""
    return MAP_URI_TEMPLATE.format(lat=fix.latitude, lon=fix.longitude, zoom=zoom)
