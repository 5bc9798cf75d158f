"""Tests for GPS coordinate conversion and map URIs."""

import pytest

from core.errors import CoordinateFormatError
from core.models import FileMetadataRecord, GPSFix, MetadataPair
from core.services.coordinates import build_map_uri, gps_fix_from_record, to_decimal_degrees


class TestToDecimalDegrees:
    def test_exiftool_dms_string(self):
        lat, lon = to_decimal_degrees("40 deg 26' 46\" N 79 deg 58' 56\" W")
        assert lat == pytest.approx(40.4461, abs=1e-4)
        assert lon == pytest.approx(-79.9822, abs=1e-4)

    def test_degree_sign_and_fused_direction(self):
        lat, lon = to_decimal_degrees("51°30'26.00\"N 0°7'39.00\"W")
        assert lat == pytest.approx(51.5072, abs=1e-4)
        assert lon == pytest.approx(-0.1275, abs=1e-4)

    def test_southern_hemisphere_is_negative(self):
        lat, lon = to_decimal_degrees("33 deg 52' 0\" S 151 deg 12' 0\" E")
        assert lat == pytest.approx(-33.8667, abs=1e-4)
        assert lon == pytest.approx(151.2, abs=1e-4)

    def test_longitude_first_is_swapped(self):
        lat, lon = to_decimal_degrees("79 deg 58' 56\" W 40 deg 26' 46\" N")
        assert lat == pytest.approx(40.4461, abs=1e-4)
        assert lon == pytest.approx(-79.9822, abs=1e-4)

    def test_full_word_directions_use_first_letter(self):
        lat, lon = to_decimal_degrees("10 deg 30' 0\" North 20 deg 15' 0\" East")
        assert (lat, lon) == (pytest.approx(10.5), pytest.approx(20.25))

    def test_decimal_input_is_split_verbatim(self):
        assert to_decimal_degrees("40.4461,-79.9822") == ["40.4461", "-79.9822"]

    @pytest.mark.parametrize(
        "text",
        [
            "40 deg 26' 46\" N",
            "40 deg N 79 deg W 12 deg N",
            "40 deg 26' N 79 deg 58'",
            "40 deg 26' X 79 deg 58' W",
        ],
    )
    def test_malformed_input_raises(self, text):
        with pytest.raises(CoordinateFormatError):
            to_decimal_degrees(text)

    def test_format_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            to_decimal_degrees("1 N")


def _record(**exif) -> FileMetadataRecord:
    pairs = tuple(MetadataPair(label, value) for label, value in exif.items())
    return FileMetadataRecord(source_file="/photos/a.jpg", categories={"EXIF": pairs})


class TestGpsFixFromRecord:
    def test_no_gps_tags(self):
        record = FileMetadataRecord("/photos/a.jpg", {"EXIF": (MetadataPair("Make", "Canon"),)})
        assert gps_fix_from_record(record) is None

    def test_dms_values_with_references(self):
        record = _record(
            **{
                "GPS Latitude Ref": "North",
                "GPS Latitude": "40 deg 26' 46.00\"",
                "GPS Longitude Ref": "West",
                "GPS Longitude": "79 deg 58' 56.00\"",
            }
        )
        fix = gps_fix_from_record(record)
        assert fix.latitude == pytest.approx(40.4461, abs=1e-4)
        assert fix.longitude == pytest.approx(-79.9822, abs=1e-4)

    def test_numeric_values_take_sign_from_reference(self):
        record = _record(
            **{
                "GPS Latitude": 33.5,
                "GPS Latitude Ref": "South",
                "GPS Longitude": 151.25,
                "GPS Longitude Ref": "East",
            }
        )
        assert gps_fix_from_record(record) == GPSFix(-33.5, 151.25)

    def test_unreadable_values_raise(self):
        record = _record(**{"GPS Latitude": "somewhere", "GPS Longitude": "else"})
        with pytest.raises(CoordinateFormatError):
            gps_fix_from_record(record)


def test_map_uri_uses_zoom_8():
    assert build_map_uri(GPSFix(40.5, -79.25)) == (
        "https://www.openstreetmap.org/?mlat=40.5&mlon=-79.25&zoom=8"
    )
