import json

import pytest
import requests

from vitrine.config import AppConfig
from vitrine.controller import SessionController
from vitrine.models import Credentials
from vitrine.services import CatalogConnectionError, CatalogService, CatalogServiceError

API_URL = "http://api.test/api"


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif body is not None:
            self.content = json.dumps(body).encode("utf-8")
        else:
            self.content = b""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content)


class FakeSession:
    def __init__(self):
        self.requests = []
        self.responses = []

    def queue(self, response):
        self.responses.append(response)

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.requests.append(
            {"method": method, "url": url, "json": json, "headers": headers, "timeout": timeout}
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return CatalogService(AppConfig(api_url=API_URL), session=session)


def test_login_posts_credentials_and_returns_token(client, session):
    session.queue(FakeResponse(body={"token": "t1"}))

    token = client.login(Credentials("ann", "abcd"))

    assert token == "t1"
    sent = session.requests[0]
    assert sent["method"] == "POST"
    assert sent["url"] == f"{API_URL}/auth/login"
    assert sent["json"] == {"username": "ann", "password": "abcd"}
    assert "authorization" not in sent["headers"]


def test_login_without_token_in_response_fails(client, session):
    session.queue(FakeResponse(body={"ok": True}))

    with pytest.raises(CatalogServiceError) as excinfo:
        client.login(Credentials("ann", "abcd"))

    assert not isinstance(excinfo.value, CatalogConnectionError)


def test_current_user_sends_raw_token_header(client, session):
    session.queue(FakeResponse(body={"id": 7, "username": "ann"}))

    user = client.current_user("t1")

    assert user == {"id": 7, "username": "ann"}
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == f"{API_URL}/auth/me"
    assert sent["headers"] == {"authorization": "t1"}


def test_register_posts_to_register_endpoint(client, session):
    session.queue(FakeResponse(status_code=201, body={"id": 8, "username": "bob"}))

    assert client.register(Credentials("bob", "abcd")) == {"id": 8, "username": "bob"}
    assert session.requests[0]["url"] == f"{API_URL}/auth/register"


def test_list_products_is_anonymous(client, session):
    session.queue(FakeResponse(body=[{"id": 1, "name": "Kettle"}]))

    assert client.list_products() == [{"id": 1, "name": "Kettle"}]
    assert session.requests[0]["headers"] == {}


def test_favorite_endpoints_are_scoped_to_the_user(client, session):
    session.queue(FakeResponse(body=[]))
    session.queue(FakeResponse(status_code=201, body={"id": 5, "product_id": 3}))
    session.queue(FakeResponse(status_code=204))

    assert client.list_favorites(7, "t1") == []
    assert client.add_favorite(7, 3, "t1") == {"id": 5, "product_id": 3}
    assert client.remove_favorite(7, 5, "t1") is None

    assert [(r["method"], r["url"]) for r in session.requests] == [
        ("GET", f"{API_URL}/users/7/favorites"),
        ("POST", f"{API_URL}/users/7/favorites"),
        ("DELETE", f"{API_URL}/users/7/favorites/5"),
    ]
    assert session.requests[1]["json"] == {"product_id": 3}
    assert all(r["headers"] == {"authorization": "t1"} for r in session.requests)


def test_error_response_carries_status_and_payload(client, session):
    session.queue(FakeResponse(status_code=401, body={"error": "not authorized"}))

    with pytest.raises(CatalogServiceError) as excinfo:
        client.login(Credentials("ann", "nope"))

    assert excinfo.value.status_code == 401
    assert excinfo.value.payload == {"error": "not authorized"}
    assert excinfo.value.error_code == "not authorized"


def test_error_response_without_json_body(client, session):
    session.queue(FakeResponse(status_code=502, raw=b"<html>Bad gateway</html>"))

    with pytest.raises(CatalogServiceError) as excinfo:
        client.list_products()

    assert excinfo.value.status_code == 502
    assert excinfo.value.payload == {}
    assert excinfo.value.error_code is None


def test_transport_failure_becomes_connection_error(client, session):
    session.queue(requests.ConnectionError("refused"))

    with pytest.raises(CatalogConnectionError) as excinfo:
        client.list_products()

    assert excinfo.value.status_code is None


def test_configured_timeout_is_forwarded(session):
    client = CatalogService(AppConfig(api_url=API_URL + "/", timeout=2.5), session=session)
    session.queue(FakeResponse(body=[]))

    client.list_products()

    assert session.requests[0]["timeout"] == 2.5
    assert session.requests[0]["url"] == f"{API_URL}/products"


def test_add_favorite_without_record_in_reply_fails(client, session):
    session.queue(FakeResponse(status_code=201))

    with pytest.raises(CatalogServiceError):
        client.add_favorite(7, 3, "t1")


@pytest.mark.parametrize("body", [{"products": []}, [1, 2], None])
def test_list_products_rejects_unexpected_shapes(client, session, body):
    session.queue(FakeResponse(body=body))

    with pytest.raises(CatalogServiceError):
        client.list_products()


def test_empty_favorite_reply_keeps_favorites_usable(client, session, tokens):
    controller = SessionController(service=client, tokens=tokens)
    tokens.save("t1")
    session.queue(FakeResponse(body={"id": 7, "username": "ann"}))
    session.queue(FakeResponse(body=[{"id": 11, "product_id": 2}]))
    controller.bootstrap()
    session.queue(FakeResponse(status_code=201))

    snapshot = controller.add_favorite(3)

    assert snapshot.favorites == ({"id": 11, "product_id": 2},)
    assert snapshot.favorite_for(3) is None

    session.queue(FakeResponse(status_code=201, body={"id": 12, "product_id": 1}))
    assert controller.toggle_favorite(1).favorite_for(1) == {"id": 12, "product_id": 1}
