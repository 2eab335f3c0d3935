from __future__ import annotations

from typing import Any, Dict, Mapping

from projection.errors import MissingField

# Key pairs seen on geo-points serialized as plain maps.
_MAPPING_KEYS = (
    ("latitude", "longitude"),
    ("_latitude", "_longitude"),
    ("lat", "lng"),
)


def normalize_geo_point(value: Any, path: str = "geo_point") -> Dict[str, Any]:
    """Return the index's ``{"lat", "lng"}`` shape for a store geo-point.

    Values pass through verbatim; no range check is made.
    """
    if value is None:
        raise MissingField(path)

    if isinstance(value, Mapping):
        for lat_key, lng_key in _MAPPING_KEYS:
            if lat_key in value and lng_key in value:
                return {"lat": value[lat_key], "lng": value[lng_key]}
        raise MissingField(f"{path}.latitude")

    try:
        return {"lat": value.latitude, "lng": value.longitude}
    except AttributeError:
        raise MissingField(f"{path}.latitude")
