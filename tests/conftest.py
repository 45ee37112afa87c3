"""Shared fixtures: a fresh store per test and a running app around it."""

import os

import pytest
from fastapi.testclient import TestClient

from blogposts.posts.gateway import PostGateway
from blogposts.posts.main import create_app
from blogposts.posts.models import BlogPost
from blogposts.shared.config import Settings
from blogposts.shared.database import Base, Database

SEED_POSTS = [
    {
        "title": f"Post number {i}",
        "author": {"firstName": first, "lastName": last},
        "content": f"Body text of post {i}.",
    }
    for i, (first, last) in enumerate(
        [
            ("Ada", "Lovelace"),
            ("Alan", "Turing"),
            ("Grace", "Hopper"),
            ("Edsger", "Dijkstra"),
            ("Barbara", "Liskov"),
            ("Donald", "Knuth"),
            ("Margaret", "Hamilton"),
            ("Ken", "Thompson"),
            ("Frances", "Allen"),
            ("Dennis", "Ritchie"),
        ],
        start=1,
    )
]


@pytest.fixture()
def database_url(tmp_path):
    """TEST_DATABASE_URL when set, otherwise a throwaway SQLite file."""
    return os.getenv("TEST_DATABASE_URL") or f"sqlite:///{tmp_path / 'blog.db'}"


@pytest.fixture()
def settings(database_url):
    return Settings(database_url=database_url)


@pytest.fixture()
def database(database_url):
    db = Database(database_url)
    db.connect()
    yield db
    Base.metadata.drop_all(bind=db.engine)
    db.close()


@pytest.fixture()
def gateway(database):
    session = database.session()
    yield PostGateway(session)
    session.close()


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
    # drop whatever the test left behind when running against a shared store
    db = Database(app.state.settings.database_url)
    db.connect()
    Base.metadata.drop_all(bind=db.engine)
    db.close()


@pytest.fixture()
def store(client):
    """Gateway on its own session, for checking what the API wrote."""
    session = client.app.state.database.session()
    yield PostGateway(session)
    session.close()


@pytest.fixture()
def seeded(store):
    """Ten posts created directly in the store."""
    return [store.create_post(**data) for data in SEED_POSTS]


@pytest.fixture()
def fetch_post(client):
    """Read a post on a fresh session; None if it does not exist."""
    def _fetch(post_id):
        session = client.app.state.database.session()
        try:
            return session.get(BlogPost, post_id)
        finally:
            session.close()
    return _fetch


@pytest.fixture()
def count_posts(client):
    def _count():
        session = client.app.state.database.session()
        try:
            return len(PostGateway(session).list_posts())
        finally:
            session.close()
    return _count
