"""Tests for turning raw tool output into metadata records."""

import json

import pytest

from core.errors import UnparseableMetadataError
from core.models import MetadataPair
from core.services.metadata_transformer import parse_output, transform


def _raw(document) -> str:
    return json.dumps(document)


class TestParseOutput:
    def test_categories_keep_tool_order_and_drop_bookkeeping_keys(self, make_document):
        document = make_document(
            "a.jpg",
            EXIF={"Make": {"desc": "Make", "val": "Canon"}},
            Composite={"ImageSize": {"desc": "Image Size", "val": "4000x3000"}},
        )
        record = parse_output(_raw(document))

        assert list(record.categories) == ["File", "EXIF", "Composite"]
        assert "SourceFile" not in record.categories
        assert "ExifTool" not in record.categories
        assert record.source_file == "/photos/a.jpg"

    def test_pairs_use_description_as_label(self, make_document):
        record = parse_output(_raw(make_document("a.jpg")))

        assert record.pairs("File") == (
            MetadataPair("File Name", "a.jpg"),
            MetadataPair("File Size", "2.1 MB"),
            MetadataPair("MIME Type", "image/jpeg"),
        )

    def test_label_falls_back_to_tag_key(self):
        raw = _raw([{"SourceFile": "x", "EXIF": {"Orientation": {"val": 1}}}])
        assert parse_output(raw).pairs("EXIF") == (MetadataPair("Orientation", 1),)

    @pytest.mark.parametrize("empty", [None, "", [], {}])
    def test_empty_values_are_dropped(self, empty):
        raw = _raw(
            [
                {
                    "EXIF": {
                        "Artist": {"desc": "Artist", "val": empty},
                        "Make": {"desc": "Make", "val": "Nikon"},
                    }
                }
            ]
        )
        assert parse_output(raw).pairs("EXIF") == (MetadataPair("Make", "Nikon"),)

    def test_missing_val_is_dropped(self):
        raw = _raw([{"EXIF": {"Artist": {"desc": "Artist"}}}])
        assert parse_output(raw).pairs("EXIF") == ()

    def test_numbers_are_preserved_including_zero(self):
        raw = _raw(
            [
                {
                    "EXIF": {
                        "ExposureCompensation": {"desc": "Exposure Compensation", "val": 0},
                        "ISO": {"desc": "ISO", "val": 200},
                        "FNumber": {"desc": "F Number", "val": 2.8},
                    }
                }
            ]
        )
        values = [pair.value for pair in parse_output(raw).pairs("EXIF")]
        assert values == [0, 200, 2.8]

    def test_non_object_categories_are_skipped(self):
        raw = _raw([{"SourceFile": "x", "Warning": "odd", "File": {}}])
        record = parse_output(raw)
        assert list(record.categories) == ["File"]

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "not json",
            "{}",
            "[]",
            '[{"File": {}}, {"File": {}}]',
            "[1]",
        ],
    )
    def test_unexpected_documents_raise(self, raw):
        with pytest.raises(UnparseableMetadataError):
            parse_output(raw)


def test_transform_keeps_input_order(make_document):
    outputs = [_raw(make_document(name)) for name in ("b.png", "a.jpg", "c.mp4")]
    records = transform(outputs)
    assert [r.file_name for r in records] == ["b.png", "a.jpg", "c.mp4"]


def test_transform_of_nothing_is_empty():
    assert transform([]) == []
