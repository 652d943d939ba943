"""
End-to-end tests for the hurl API.

Hurls are sent to the local target server from conftest; the database is
a throwaway SQLite file wired in through dependency overrides.
"""

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hurl.main import app
from hurl.config import Settings, get_settings
from hurl.database import Base, get_db
from hurl.models.record import Record
from hurl.services.rate_limiter import get_rate_limiter


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_hurl_api.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


def count_records() -> int:
    db = TestSessionLocal()
    try:
        return db.query(Record).count()
    finally:
        db.close()


class AlwaysLimited:
    def is_rate_limited(self) -> bool:
        return True


@pytest.fixture(scope="function")
def client():
    """Create a test client with fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db

    # Built without the lifespan so init_db never touches the configured database
    yield TestClient(app)

    Base.metadata.drop_all(bind=test_engine)
    app.dependency_overrides.clear()


# ============== Running hurls ==============

class TestRunHurl:

    def test_get_renders_header_body_and_request(self, client, target_server):
        response = client.post("/", json={"url": f"{target_server}/json", "method": "GET"})

        assert response.status_code == 200
        data = response.json()
        assert data["header"].startswith("HTTP/1.1 200 OK\n")
        assert json.loads(data["body"]) == {"name": "hurl", "tags": ["a", "b"]}
        assert data["body"] == json.dumps({"name": "hurl", "tags": ["a", "b"]}, indent=2)
        assert data["request"].startswith("GET /json HTTP/1.1\n")
        assert data["hurl_id"]
        assert data["view_id"] == data["hurl_id"]
        assert data["prev_hurl"] is None

    def test_hurl_and_view_are_stored(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/json"}).json()

        hurl = client.get(f"/hurls/{data['hurl_id']}").json()
        assert hurl["hurl"]["url"] == f"{target_server}/json"
        assert hurl["hurl"]["id"] == data["hurl_id"]
        assert hurl["view"] == {
            "header": data["header"],
            "body": data["body"],
            "request": data["request"],
        }

        view = client.get(f"/views/{data['view_id']}").json()
        assert view["body"] == data["body"]

    def test_post_fields_appear_in_request(self, client, target_server):
        data = client.post("/", json={
            "url": f"{target_server}/echo",
            "method": "post",
            "param-keys": ["n1", "n2"],
            "param-vals": ["", "v 2"],
        }).json()

        assert data["request"].startswith("POST /echo HTTP/1.1\n")
        assert data["request"].endswith("\n\nn2=v+2")
        assert json.loads(data["body"])["body"] == "n2=v+2"

    def test_put_raw_body_wins_over_fields(self, client, target_server):
        data = client.post("/", json={
            "url": f"{target_server}/echo",
            "method": "PUT",
            "param-keys": ["a"],
            "param-vals": ["1"],
            "post-body": "just this",
        }).json()

        assert json.loads(data["body"])["body"] == "just this"
        assert data["request"].endswith("\n\njust this")

    def test_headers_and_basic_auth_are_sent(self, client, target_server):
        data = client.post("/", json={
            "url": f"{target_server}/json",
            "auth": "basic",
            "username": "alice",
            "password": "secret",
            "header-keys": ["X-One", "X-Skipped"],
            "header-vals": ["1", ""],
        }).json()

        request_lines = data["request"].split("\n")
        assert "Authorization: Basic YWxpY2U6c2VjcmV0" in request_lines
        assert "X-One: 1" in request_lines
        assert not any(line.startswith("X-Skipped") for line in request_lines)

    def test_js_url_body_is_pretty_printed(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/app.js"}).json()
        assert data["body"] == '{\n  "served": "as html"\n}'

    def test_javascript_body_is_beautified(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/script"}).json()
        assert data["body"] == "function f() {\n  return 1;\n}"

    def test_html_body_is_untouched(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/page"}).json()
        assert data["body"] == "<html><body>hi</body></html>"

    def test_broken_json_body_falls_back_to_raw(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/broken-json"}).json()
        assert data["body"] == '{"name": "hurl", '

    def test_follow_redirects(self, client, target_server):
        data = client.post("/", json={
            "url": f"{target_server}/redirect",
            "follow_redirects": True,
        }).json()

        assert "HTTP/1.1 302 Found" in data["header"]
        assert data["header"].split("\n\n")[-1].startswith("HTTP/1.1 200 OK")

    def test_same_params_same_id(self, client, target_server):
        payload = {"url": f"{target_server}/json", "method": "GET"}
        first = client.post("/", json=payload).json()
        second = client.post("/", json=payload).json()

        assert first["hurl_id"] == second["hurl_id"]
        # One hurl and one view, however often it runs
        assert count_records() == 2


# ============== Failures ==============

class TestHurlFailures:

    def test_javascript_url_is_rejected(self, client):
        response = client.post("/", json={"url": "javascript:alert(1)"})

        assert response.status_code == 400
        assert response.json() == {"error": "That's... wait.. what?! (invalid URL)"}
        assert count_records() == 0

    def test_own_host_is_rejected(self, client):
        response = client.post("/", json={"url": "http://hurl.it/"})

        assert response.status_code == 400
        assert response.json() == {"error": "That's... wait.. what?! (invalid URL)"}
        assert count_records() == 0

    def test_missing_url_is_rejected(self, client):
        response = client.post("/", json={})
        assert response.json()["error"] == "That's... wait.. what?! (invalid URL)"

    def test_network_failure(self, client):
        response = client.post("/", json={"url": "http://unroutable.invalid", "method": "GET"})

        assert response.status_code == 502
        assert response.json()["error"]
        assert count_records() == 0

    def test_connection_refused(self, client, closed_port_url):
        response = client.post("/", json={"url": closed_port_url})

        assert response.status_code == 502
        assert "error" in response.json()
        assert count_records() == 0

    def test_unsupported_method_message_is_escaped(self, client, target_server):
        response = client.post("/", json={"url": f"{target_server}/", "method": "<b>"})

        assert response.status_code == 502
        assert response.json() == {"error": "Unsupported HTTP method: &lt;B&gt;"}

    def test_rate_limited(self, client, target_server):
        app.dependency_overrides[get_rate_limiter] = lambda: AlwaysLimited()

        response = client.post("/", json={"url": f"{target_server}/json"})

        assert response.status_code == 429
        assert response.json() == {"error": "Calm down and try my margarita! (rate limited)"}
        assert count_records() == 0


# ============== Session history ==============

class TestSessionHistory:

    def test_prev_hurl_links_to_previous_hurl(self, client, target_server):
        first = client.post("/", json={"url": f"{target_server}/json"}).json()
        second = client.post("/", json={"url": f"{target_server}/page"}).json()

        assert first["prev_hurl"] is None
        assert second["prev_hurl"] == first["hurl_id"]

    def test_list_newest_first(self, client, target_server):
        first = client.post("/", json={"url": f"{target_server}/json"}).json()
        second = client.post("/", json={"url": f"{target_server}/page"}).json()

        listing = client.get("/").json()

        assert listing["total"] == 2
        assert [item["id"] for item in listing["items"]] == [second["hurl_id"], first["hurl_id"]]

    def test_sessions_are_independent(self, client, target_server):
        client.post("/", json={"url": f"{target_server}/json"})

        # No lifespan: the overridden test database is already set up
        other = TestClient(app)
        assert other.get("/").json()["total"] == 0

    def test_owner_deletes_hurl_and_view(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/json"}).json()

        response = client.delete(f"/hurls/{data['hurl_id']}")

        assert response.json() == {"status": "ok"}
        assert client.get("/").json()["total"] == 0
        assert client.get(f"/hurls/{data['hurl_id']}").status_code == 404
        assert client.get(f"/views/{data['view_id']}").status_code == 404
        assert count_records() == 0

    def test_other_sessions_cannot_delete(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/json"}).json()

        other = TestClient(app)
        assert other.delete(f"/hurls/{data['hurl_id']}").json() == {"status": "ok"}

        assert client.get(f"/hurls/{data['hurl_id']}").status_code == 200
        assert client.get("/").json()["total"] == 1


# ============== Lookups ==============

class TestLookups:

    def test_unknown_hurl(self, client):
        response = client.get("/hurls/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"
        assert "missing" in response.json()["detail"]

    def test_unknown_view(self, client):
        assert client.get("/views/missing").status_code == 404

    def test_hurl_with_view(self, client, target_server):
        first = client.post("/", json={"url": f"{target_server}/json"}).json()
        second = client.post("/", json={"url": f"{target_server}/page"}).json()

        response = client.get(f"/hurls/{first['hurl_id']}/{second['view_id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["hurl"]["id"] == first["hurl_id"]
        assert data["view"]["body"] == second["body"]
        assert data["view_id"] == second["view_id"]

    def test_hurl_with_unknown_view(self, client, target_server):
        data = client.post("/", json={"url": f"{target_server}/json"}).json()
        assert client.get(f"/hurls/{data['hurl_id']}/missing").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


# ============== Basic auth gate ==============

class TestBasicAuthGate:

    @pytest.fixture
    def protected(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(
            basic_auth_username="admin",
            basic_auth_password="hunter2",
        )
        return client

    def test_post_requires_credentials(self, protected, target_server):
        response = protected.post("/", json={"url": f"{target_server}/json"})
        assert response.status_code == 401
        assert count_records() == 0

    def test_post_with_credentials(self, protected, target_server):
        response = protected.post(
            "/",
            json={"url": f"{target_server}/json"},
            auth=("admin", "hunter2"),
        )
        assert response.status_code == 200

    def test_wrong_credentials(self, protected, target_server):
        response = protected.post(
            "/",
            json={"url": f"{target_server}/json"},
            auth=("admin", "nope"),
        )
        assert response.status_code == 401

    def test_reads_stay_open(self, protected):
        assert protected.get("/").status_code == 200


class TestValidationErrors:

    def test_bad_parameter_type(self, client):
        response = client.post("/", json={"url": "http://example.com", "follow_redirects": "maybe"})

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "follow_redirects" in data["detail"]
