import pytest

from config.settings import Settings
from projection.errors import IndexWriteFailure, MissingField
from sync.events import ChangeEvent, ChangeKind
from sync.reactors import ReactorContext
from sync.router import dispatch

from fakes import FakeIndex

TOPIC = {"name": "Climate", "description": "...", "count": {"packages": 5, "templates": 2}}


def test_topic_create_and_update_upsert(ctx, fake_index):
    for kind in (ChangeKind.CREATED, ChangeKind.UPDATED):
        out = dispatch(ChangeEvent(kind, "topics/t1", data=TOPIC), ctx)
        assert out == {"ok": True, "action": "upsert", "index": "topics", "objectID": "t1"}
    assert [r["objectID"] for _, r in fake_index.upserts] == ["t1", "t1"]


def test_topic_delete(ctx, fake_index):
    out = dispatch(ChangeEvent(ChangeKind.DELETED, "topics/t1"), ctx)
    assert out["action"] == "delete"
    assert fake_index.deletes == [("topics", "t1")]


def test_package_write_and_delete(ctx, fake_index, package_data):
    dispatch(ChangeEvent(ChangeKind.CREATED, "packages/p1", data=package_data), ctx)
    dispatch(ChangeEvent(ChangeKind.DELETED, "packages/p1"), ctx)
    index_name, record = fake_index.upserts[0]
    assert index_name == "packages"
    assert record["objectID"] == "p1"
    assert fake_index.deletes == [("packages", "p1")]


def test_conversation_created_uses_conversation_id(ctx, fake_index):
    ev = ChangeEvent(ChangeKind.CREATED, "topics/t1/conversations/c1", data={"legislative_area": {"state": "CA"}})
    dispatch(ev, ctx)
    assert fake_index.upserts == [("conversations", {"state": "CA", "objectID": "c1"})]


def test_conversation_update_is_ignored(ctx, fake_index):
    ev = ChangeEvent(ChangeKind.UPDATED, "topics/t1/conversations/c1", data={"legislative_area": {"state": "NV"}})
    assert dispatch(ev, ctx)["action"] == "ignored"
    assert fake_index.upserts == []


def test_conversation_delete(ctx, fake_index):
    dispatch(ChangeEvent(ChangeKind.DELETED, "topics/t1/conversations/c1"), ctx)
    assert fake_index.deletes == [("conversations", "c1")]


def test_unrouted_path_ignored(ctx, fake_index):
    assert dispatch(ChangeEvent(ChangeKind.CREATED, "users/u1", data={}), ctx)["action"] == "ignored"
    assert fake_index.upserts == [] and fake_index.deletes == []


def test_builder_error_means_no_write(ctx, fake_index):
    with pytest.raises(MissingField):
        dispatch(ChangeEvent(ChangeKind.CREATED, "topics/t1", data={"name": "x"}), ctx)
    assert fake_index.upserts == []


def test_index_failure_propagates():
    ctx = ReactorContext(index=FakeIndex(fail_with=IndexWriteFailure("topics", "t1", "boom")))
    with pytest.raises(IndexWriteFailure):
        dispatch(ChangeEvent(ChangeKind.DELETED, "topics/t1"), ctx)


def test_context_from_settings_uses_configured_names():
    s = Settings(CONVERSATIONS_INDEX="topicConversations", PACKAGES_INDEX="pk", TOPICS_INDEX="tp")
    ctx = ReactorContext.from_settings(s, index=FakeIndex())
    assert (ctx.packages_index, ctx.topics_index, ctx.conversations_index) == ("pk", "tp", "topicConversations")
