import json

import httpx
import pytest

from projection.errors import IndexWriteFailure
from search.algolia_client import AlgoliaIndexClient


def _client(handler):
    return AlgoliaIndexClient(app_id="APP", api_key="admin-key", transport=httpx.MockTransport(handler))


def test_upsert_puts_full_record():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["key"] = request.headers["X-Algolia-API-Key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"objectID": "p1", "taskID": 1})

    resp = _client(handler).upsert("packages", {"objectID": "p1", "status": "open"})
    assert resp["objectID"] == "p1"
    assert seen["method"] == "PUT"
    assert seen["url"] == "https://APP.algolia.net/1/indexes/packages/p1"
    assert seen["key"] == "admin-key"
    assert seen["body"] == {"objectID": "p1", "status": "open"}


def test_object_id_is_url_encoded():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.raw_path
        return httpx.Response(200, json={})

    _client(handler).delete("topics", "a/b c")
    assert seen["path"] == b"/1/indexes/topics/a%2Fb%20c"


def test_delete_missing_object_is_ok():
    client = _client(lambda request: httpx.Response(404, json={"message": "ObjectID does not exist"}))
    assert client.delete("topics", "never") == {"objectID": "never", "deleted": False}


def test_write_rejection_raises():
    client = _client(lambda request: httpx.Response(403, json={"message": "Invalid Application-ID or API key"}))
    with pytest.raises(IndexWriteFailure) as exc:
        client.upsert("topics", {"objectID": "t1"})
    assert exc.value.status_code == 403
    assert exc.value.index_name == "topics"


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(IndexWriteFailure) as exc:
        _client(handler).delete("packages", "p1")
    assert exc.value.status_code is None


def test_missing_credentials(monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "ALGOLIA_APP_ID", "")
    monkeypatch.setattr(settings, "ALGOLIA_ADMIN_KEY", "")
    with pytest.raises(RuntimeError):
        AlgoliaIndexClient()


def test_package_with_store_native_values_is_sent_as_json(package_data):
    from datetime import datetime, timezone

    from sync.decoder import DocumentPointer
    from sync.events import ChangeEvent, ChangeKind
    from sync.reactors import ReactorContext
    from sync.router import dispatch

    sent = {}

    def handler(request: httpx.Request):
        sent["body"] = json.loads(request.content)
        return httpx.Response(200, json={"objectID": "p1"})

    package_data["relations"]["followers"] = [
        DocumentPointer("projects/p/databases/(default)/documents/users/u2"),
        DocumentPointer("projects/p/databases/(default)/documents/users/u3"),
    ]
    package_data["content"]["external_actions"] = [
        {"kind": "call", "deadline": datetime(2024, 1, 1, tzinfo=timezone.utc), "token": b"hi"}
    ]
    ctx = ReactorContext(index=_client(handler))

    out = dispatch(ChangeEvent(ChangeKind.CREATED, "packages/p1", data=package_data), ctx)
    assert out["action"] == "upsert"
    assert sent["body"]["relations"]["followers"] == ["u2", "u3"]
    assert sent["body"]["content"]["external_actions"] == [{"kind": "call", "deadline": 1704067200, "token": "aGk="}]
