from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from projection.errors import MalformedInput, MissingField

# Returned by lookup() when any segment of the path is absent.
MISSING: Any = object()


def join_path(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return f"{prefix}.{path}"


def lookup(source: Any, path: str) -> Any:
    cur = source
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return MISSING
        cur = cur[part]
    return cur


def require(source: Any, path: str, prefix: str = "") -> Any:
    value = lookup(source, path)
    if value is MISSING or value is None:
        raise MissingField(join_path(prefix, path))
    return value


def require_mapping(source: Any, path: str, prefix: str = "") -> Mapping[str, Any]:
    value = require(source, path, prefix)
    if not isinstance(value, Mapping):
        raise MalformedInput(join_path(prefix, path), "expected_map")
    return value


def assign(target: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = target
    for part in parts[:-1]:
        cur = cur.setdefault(part, {})
    cur[parts[-1]] = value


@dataclass(frozen=True)
class OptionalField:
    """One row of an optional-field mapping table.

    ``target`` defaults to ``source``. Both are dotted paths.
    """

    source: str
    target: Optional[str] = None

    @property
    def target_path(self) -> str:
        return self.target or self.source


def optional_fields(*names: str) -> tuple:
    return tuple(OptionalField(n) for n in names)


def copy_optional(source: Any, target: Dict[str, Any], fields: Iterable[OptionalField]) -> Dict[str, Any]:
    # Fields are independent; an absent source path leaves the target key unset.
    for f in fields:
        value = lookup(source, f.source)
        if value is MISSING:
            continue
        assign(target, f.target_path, value)
    return target
