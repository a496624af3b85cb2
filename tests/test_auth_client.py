"""Tests for the hosted auth client, against an httpx.MockTransport."""

import json

import httpx
import pytest

from jeevraksha.services.auth_client import AuthServiceError, HostedAuthClient


def make_client(handler) -> HostedAuthClient:
    return HostedAuthClient("http://auth.test/auth/v1/", "anon-key", transport=httpx.MockTransport(handler))


async def test_sign_up_posts_credentials_and_metadata():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["apikey"] = request.headers["apikey"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"user": {"id": "u1", "email": "a@b.org"}})

    user = await make_client(handler).sign_up("a@b.org", "secret1", {"role": "volunteer"})

    assert user == {"id": "u1", "email": "a@b.org"}
    assert seen["path"] == "/auth/v1/signup"
    assert seen["apikey"] == "anon-key"
    assert seen["body"] == {"email": "a@b.org", "password": "secret1", "data": {"role": "volunteer"}}


async def test_sign_up_accepts_bare_user_body():
    def handler(request):
        return httpx.Response(200, json={"id": "u2", "email": "c@d.org"})

    user = await make_client(handler).sign_up("c@d.org", "secret1")
    assert user["id"] == "u2"


async def test_sign_in_uses_password_grant():
    def handler(request):
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        return httpx.Response(200, json={"access_token": "tok", "user": {"id": "u1"}})

    session = await make_client(handler).sign_in("a@b.org", "secret1")
    assert session["access_token"] == "tok"


async def test_get_user_sends_bearer_token():
    def handler(request):
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"id": "u1", "email": "a@b.org"})

    user = await make_client(handler).get_user("tok")
    assert user["id"] == "u1"


async def test_sign_out_handles_empty_body():
    def handler(request):
        assert request.url.path == "/auth/v1/logout"
        return httpx.Response(204)

    assert await make_client(handler).sign_out("tok") is None


async def test_password_reset_passes_redirect():
    def handler(request):
        assert request.url.path == "/auth/v1/recover"
        assert request.url.params["redirect_to"] == "http://app.test/reset-password"
        return httpx.Response(200, json={})

    await make_client(handler).send_password_reset("a@b.org", redirect_to="http://app.test/reset-password")


@pytest.mark.parametrize(
    "body,message",
    [
        ({"msg": "Invalid login credentials"}, "Invalid login credentials"),
        ({"error": "invalid_grant", "error_description": "Bad password"}, "Bad password"),
        ({"message": "User already registered"}, "User already registered"),
    ],
)
async def test_error_responses_raise_with_message(body, message):
    def handler(request):
        return httpx.Response(400, json=body)

    with pytest.raises(AuthServiceError) as exc:
        await make_client(handler).sign_in("a@b.org", "wrong")
    assert exc.value.status_code == 400
    assert exc.value.message == message


async def test_non_json_error_uses_text():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(AuthServiceError) as exc:
        await make_client(handler).get_user("tok")
    assert exc.value.status_code == 502
    assert exc.value.message == "Bad Gateway"


async def test_transport_failure_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AuthServiceError) as exc:
        await make_client(handler).get_user("tok")
    assert exc.value.status_code == 503


async def test_unconfigured_client_refuses():
    auth_client = HostedAuthClient("", "")
    assert auth_client.configured is False
    with pytest.raises(AuthServiceError) as exc:
        await auth_client.get_user("tok")
    assert exc.value.status_code == 503
