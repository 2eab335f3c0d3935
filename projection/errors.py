from __future__ import annotations

from typing import Optional


class ProjectionError(Exception):
    """Raised by record builders; nothing is written to the index when this escapes."""

    code = "projection_error"

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class MissingField(ProjectionError):
    code = "missing_field"

    def __init__(self, path: str):
        super().__init__(path, f"missing_field:{path}")


class MalformedInput(ProjectionError):
    code = "malformed_input"

    def __init__(self, path: str, reason: str):
        super().__init__(path, f"malformed_input:{path}:{reason}")
        self.reason = reason


class IndexWriteFailure(Exception):
    def __init__(self, index_name: str, object_id: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"index_write_failure:{index_name}/{object_id}:{message}")
        self.index_name = index_name
        self.object_id = object_id
        self.status_code = status_code
