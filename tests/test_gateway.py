"""Tests for the blog post persistence gateway."""

import pytest
from sqlalchemy.exc import OperationalError

from blogposts.posts.gateway import PostGateway, PostNotFound
from blogposts.shared.errors import StoreError

AUTHOR = {"firstName": "Ada", "lastName": "Lovelace"}


def test_create_assigns_id_and_created(gateway):
    post = gateway.create_post(title="First", author=AUTHOR, content="Hello")

    assert post.id and len(post.id) == 32
    assert post.created is not None
    assert post.author == AUTHOR


def test_ids_are_unique(gateway):
    ids = {gateway.create_post(title=f"T{i}").id for i in range(5)}
    assert len(ids) == 5


def test_get_post(gateway, database):
    created = gateway.create_post(title="First", author=AUTHOR, content="Hello")

    session = database.session()
    try:
        post = PostGateway(session).get_post(created.id)
    finally:
        session.close()

    assert post.title == "First"
    assert post.content == "Hello"
    assert post.author_name == "Ada Lovelace"


def test_get_missing_post(gateway):
    with pytest.raises(PostNotFound) as exc_info:
        gateway.get_post("0" * 32)
    assert exc_info.value.post_id == "0" * 32
    assert isinstance(exc_info.value, StoreError)


def test_list_posts(gateway):
    assert gateway.list_posts() == []
    for i in range(3):
        gateway.create_post(title=f"T{i}")
    assert [p.title for p in gateway.list_posts()] == ["T0", "T1", "T2"]


def test_update_is_partial(gateway, database):
    post = gateway.create_post(title="Old", author=AUTHOR, content="Keep me")

    assert gateway.update_post(post.id, {"title": "New"}) is True

    session = database.session()
    try:
        stored = session.get(type(post), post.id)
    finally:
        session.close()
    assert stored.title == "New"
    assert stored.content == "Keep me"
    assert stored.author == AUTHOR


def test_update_missing_post_is_a_no_op(gateway):
    assert gateway.update_post("missing", {"title": "New"}) is False
    assert gateway.list_posts() == []


def test_update_without_changes_writes_nothing(gateway):
    post = gateway.create_post(title="Old")
    assert gateway.update_post(post.id, {}) is False
    assert gateway.get_post(post.id).title == "Old"


def test_update_rejects_unknown_fields(gateway):
    post = gateway.create_post(title="Old")
    with pytest.raises(ValueError, match="created"):
        gateway.update_post(post.id, {"created": None})


def test_empty_title_rejected_by_store(gateway):
    post = gateway.create_post(title="Old")
    with pytest.raises(StoreError):
        gateway.update_post(post.id, {"title": ""})
    assert gateway.get_post(post.id).title == "Old"


def test_delete_post(gateway):
    post = gateway.create_post(title="Doomed")

    assert gateway.delete_post(post.id) is True
    assert gateway.delete_post(post.id) is False
    assert gateway.list_posts() == []


def test_store_failures_become_store_error(gateway, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(gateway.db, "execute", broken)

    with pytest.raises(StoreError) as exc_info:
        gateway.delete_post("anything")
    assert not isinstance(exc_info.value, PostNotFound)
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_created_reads_back_as_utc(gateway, database):
    post = gateway.create_post(title="Timed")

    session = database.session()
    try:
        stored = session.get(type(post), post.id)
    finally:
        session.close()

    assert stored.created.tzinfo is not None
    assert stored.created.utcoffset().total_seconds() == 0
    assert stored.created == post.created
