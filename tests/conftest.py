import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path):
    # a fresh SQLite file per test
    db_file = tmp_path / "catalog.db"
    return Settings(database_url=f"sqlite+aiosqlite:///{db_file}", environment="testing")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store(app):
    return app.state.store


@pytest.fixture
def run_in_app(client, store):
    """Run `fn(db)` on the app's event loop with a fresh session."""
    def run(fn):
        async def call():
            async with store.session() as db:
                return await fn(db)
        return client.portal.call(call)
    return run


def _created_id(response, prefix):
    assert response.status_code == 303, response.text
    location = response.headers["location"]
    assert location.startswith(prefix)
    return location[len(prefix):]


@pytest.fixture
def make_author(client):
    def make(first_name="Patrick", family_name="Rothfuss", **extra):
        response = client.post(
            "/catalog/author/create",
            data={"first_name": first_name, "family_name": family_name, **extra},
            follow_redirects=False,
        )
        return _created_id(response, "/catalog/author/")
    return make


@pytest.fixture
def make_genre(client):
    def make(name="Fantasy"):
        response = client.post("/catalog/genre/create", data={"name": name}, follow_redirects=False)
        return _created_id(response, "/catalog/genre/")
    return make


@pytest.fixture
def make_book(client):
    def make(author_id, title="The Name of the Wind", genre=None, summary="A summary", isbn="9780756404741"):
        data = {"title": title, "author": author_id, "summary": summary, "isbn": isbn}
        if genre is not None:
            data["genre"] = genre
        response = client.post("/catalog/book/create", data=data, follow_redirects=False)
        return _created_id(response, "/catalog/book/")
    return make


@pytest.fixture
def make_copy(client):
    def make(book_id, imprint="Gollancz, 2011", status="Available", due_back=""):
        response = client.post(
            "/catalog/bookinstance/create",
            data={"book": book_id, "imprint": imprint, "status": status, "due_back": due_back},
            follow_redirects=False,
        )
        return _created_id(response, "/catalog/bookinstance/")
    return make
