from datetime import datetime, timezone

import pytest
from google.cloud.firestore import GeoPoint

from projection.errors import MalformedInput
from sync.decoder import DocumentPointer, decode_document, decode_value


def test_decode_scalars():
    assert decode_value({"integerValue": "5"}) == 5
    assert decode_value({"doubleValue": 1.25}) == 1.25
    assert decode_value({"stringValue": "x"}) == "x"
    assert decode_value({"booleanValue": True}) is True
    assert decode_value({"nullValue": None}) is None
    assert decode_value({"bytesValue": "aGk="}) == b"hi"


def test_decode_geo_point_and_reference():
    gp = decode_value({"geoPointValue": {"latitude": 37.5, "longitude": -122.25}})
    assert isinstance(gp, GeoPoint)
    assert (gp.latitude, gp.longitude) == (37.5, -122.25)

    ref = decode_value({"referenceValue": "projects/p/databases/(default)/documents/topics/t1"})
    assert ref == DocumentPointer("projects/p/databases/(default)/documents/topics/t1")
    assert ref.id == "t1"


def test_decode_geo_point_omitted_zero():
    gp = decode_value({"geoPointValue": {"longitude": 10.0}})
    assert (gp.latitude, gp.longitude) == (0.0, 10.0)


def test_decode_timestamp_with_nanos():
    ts = decode_value({"timestampValue": "2024-01-01T00:00:00.123456789Z"})
    assert ts == datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)


def test_decode_nested_map_and_array():
    doc = {
        "name": "projects/p/databases/(default)/documents/topics/t1",
        "fields": {
            "count": {"mapValue": {"fields": {"packages": {"integerValue": "5"}}}},
            "tags": {"arrayValue": {"values": [{"stringValue": "a"}, {"stringValue": "b"}]}},
            "empty": {"arrayValue": {}},
        },
    }
    assert decode_document(doc) == {"count": {"packages": 5}, "tags": ["a", "b"], "empty": []}


def test_decode_absent_document():
    assert decode_document(None) is None
    assert decode_document({}) is None


def test_decode_unknown_type():
    with pytest.raises(MalformedInput):
        decode_value({"vectorValue": {}}, "embedding")
