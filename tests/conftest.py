from __future__ import annotations

import pytest
from google.cloud.firestore import GeoPoint

from sync.reactors import ReactorContext

from fakes import FakeIndex, FakeRef


@pytest.fixture
def fake_index():
    return FakeIndex()


@pytest.fixture
def ctx(fake_index):
    return ReactorContext(index=fake_index, conversations_index="conversations")


@pytest.fixture
def package_data():
    return {
        "content": {
            "category": "petition",
            "description": "Deliver signatures",
            "destination": {
                "address": "1315 10th St, Sacramento, CA",
                "geo_point": GeoPoint(38.5767, -121.4934),
                "name": "State Capitol",
            },
            "due_date": "2024-01-01T00:00:00Z",
            "headline": "Save the delta",
            "topic": {"name": "Climate", "reference": FakeRef("t1")},
            "recipient": {"name": "Gov. Office", "reference": FakeRef("r9"), "type": "official"},
        },
        "logistics": {
            "created_date": "2023-12-01T12:00:00Z",
            "status": "open",
            "origin": {
                "address": "Oakland, CA",
                "geo_point": GeoPoint(37.8044, -122.2712),
                "name": "Oakland",
            },
            "author": {"name": "Ana", "reference": FakeRef("u1")},
            "current_location": GeoPoint(37.8044, -122.2712),
        },
        "relations": {
            "count": {"followers": 3, "movers": 1},
            "followers": ["u2", "u3", "u4"],
        },
    }
