"""Tests for the FastAPI routes, with the upstream backend stubbed."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from chatfront.config import ConfigurationError, get_config
from chatfront.relay.chat import CHAT_SEND_ERROR, HISTORY_LOAD_ERROR, SESSION_EXPIRED_MESSAGE
from chatfront.relay.forgot_password import NO_VALID_EMAIL, RESEND_ERROR
from chatfront.relay.support import FALLBACK_BANNER
from chatfront.upstream.client import CSRF_HEADER_NAME, UpstreamRejected

CSRF_TOKEN = "csrf-token-1"

VALID_ACCOUNT_FORM = {
    "username": "alice",
    "email": "alice@example.com",
    "date-of-birth-day": "17",
    "date-of-birth-month": "5",
    "date-of-birth-year": "1990",
}

VALID_REGISTRATION = {
    **VALID_ACCOUNT_FORM,
    "password": "Secret1!",
    "confirmPassword": "Secret1!",
}


class TestAppShell:
    """Tests for the endpoints and handlers defined in main."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "version" in response.json()

    def test_root_redirects_to_chat(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/chat"

    def test_unknown_path_renders_not_found(self, client):
        response = client.get("/no-such-page")

        assert response.status_code == 404
        assert "Page not found" in response.text

    def test_no_cache_and_security_headers(self, client):
        response = client.get("/login")

        assert response.headers["cache-control"] == "no-cache, max-age=0, must-revalidate, no-store"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"

    def test_unexpected_error_hides_details(self, signed_in):
        with patch("chatfront.relay.chat.read_history", side_effect=RuntimeError("database on fire")):
            response = signed_in.get("/chat-history")

        assert response.status_code == 500
        assert "Sorry, there is a problem" in response.text
        assert "database on fire" not in response.text

    def test_unexpected_error_shows_details_in_development(self, signed_in, monkeypatch):
        from chatfront.config import get_config

        monkeypatch.setenv("APP_ENV", "development")
        get_config.cache_clear()

        with patch("chatfront.relay.chat.read_history", side_effect=RuntimeError("database on fire")):
            response = signed_in.get("/chat-history")

        assert response.status_code == 500
        assert "database on fire" in response.text

    def test_error_status_is_taken_from_exception(self, signed_in):
        with patch("chatfront.relay.chat.read_history", side_effect=UpstreamRejected(503)):
            response = signed_in.get("/chat-history")

        assert response.status_code == 503


class TestLifespan:
    """Tests for application startup."""

    @patch("chatfront.main.setup_logger")
    def test_startup_validates_configuration(self, mock_setup_logger):
        from chatfront.main import app

        with patch("chatfront.main.validate_config", return_value=True) as mock_validate:
            with TestClient(app) as client:
                assert client.get("/health").status_code == 200

        mock_validate.assert_called_once_with()
        mock_setup_logger.assert_called_once_with("chatfront", "INFO")

    @patch("chatfront.main.setup_logger")
    def test_invalid_configuration_stops_startup(self, mock_setup_logger, monkeypatch):
        from chatfront.main import app

        monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "-1")
        get_config.cache_clear()

        with pytest.raises(ConfigurationError) as exc_info:
            with TestClient(app):
                pass

        assert exc_info.value.variable_name == "UPSTREAM_TIMEOUT_SECONDS"
        mock_setup_logger.assert_not_called()


class TestLogin:
    """Tests for login and logout."""

    def test_login_success_bridges_upstream_session(self, client, upstream):
        upstream.on(
            "POST",
            "/login/chat",
            json={},
            headers=[
                ("set-cookie", "SESSION=upstream-abc; Path=/; HttpOnly"),
                ("set-cookie", "XSRF-TOKEN=xyz; Path=/"),
            ],
        )

        response = client.post(
            "/login",
            data={"username": "alice", "password": "Secret1!"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/chat"
        assert upstream.calls() == [("GET", "/csrf"), ("POST", "/login/chat")]
        assert upstream.last("POST", "/login/chat").headers[CSRF_HEADER_NAME] == CSRF_TOKEN
        assert upstream.body("POST", "/login/chat") == {"username": "alice", "password": "Secret1!"}
        # The upstream cookie stays on the server
        assert "SESSION" not in client.cookies
        assert "upstream-abc" not in response.headers.get("set-cookie", "")

        upstream.on("GET", "/chat/chats", json=[])
        client.get("/chat-history")
        cookie_header = upstream.last("GET", "/chat/chats").headers["cookie"]
        assert "SESSION=upstream-abc" in cookie_header
        assert "XSRF-TOKEN=xyz" in cookie_header

    def test_login_failure_shows_upstream_text(self, client, upstream):
        upstream.on("POST", "/login/chat", status=401, text="Account locked")

        response = client.post("/login", data={"username": "alice", "password": "wrong"})

        assert response.status_code == 200
        assert "Account locked" in response.text
        assert 'value="alice"' in response.text
        assert client.get("/chat", follow_redirects=False).status_code == 302

    def test_login_failure_with_json_body_uses_fallback(self, client, upstream):
        upstream.on("POST", "/login/chat", status=401, json={"error": "bad"})

        response = client.post("/login", data={"username": "alice", "password": "wrong"})

        assert "Invalid username or password." in response.text

    def test_login_failure_in_welsh(self, client, upstream):
        upstream.on("POST", "/login/chat", status=401, json={"error": "bad"})
        client.cookies.set("lang", "cy")

        response = client.post("/login", data={"username": "alice", "password": "wrong"})

        assert "Enw defnyddiwr neu gyfrinair annilys." in response.text
        assert "lang=cy" in upstream.last("POST", "/login/chat").headers["cookie"]

    def test_failed_login_keeps_existing_principal(self, signed_in, upstream):
        upstream.on("POST", "/login/chat", status=401, text="Bad credentials")

        signed_in.post("/login", data={"username": "mallory", "password": "wrong"})

        assert signed_in.get("/chat").status_code == 200

    def test_upstream_down(self, client, upstream):
        upstream.fail_connect("GET", "/csrf")

        response = client.post("/login", data={"username": "alice", "password": "Secret1!"})

        assert response.status_code == 200
        assert "Invalid username or password." in response.text

    def test_login_banners(self, client):
        assert "Your account has been created" in client.get("/login?created=true").text
        assert "Your password has been reset" in client.get("/login?passwordReset=true").text

    def test_logout(self, signed_in):
        response = signed_in.get("/logout", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/login"
        assert signed_in.get("/chat", follow_redirects=False).status_code == 302


class TestRegister:
    """Tests for registration."""

    def test_success(self, client, upstream):
        upstream.on("POST", "/account/register", json={})

        response = client.post("/register", data=VALID_REGISTRATION, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/login?created=true&lang=en"
        assert upstream.body("POST", "/account/register") == {
            "username": "alice",
            "email": "alice@example.com",
            "password": "Secret1!",
            "confirmPassword": "Secret1!",
            "dateOfBirth": "1990-05-17",
        }

    def test_validation_errors_skip_upstream(self, client, upstream):
        form = {
            **VALID_REGISTRATION,
            "email": "not-an-email",
            "date-of-birth-day": "31",
            "date-of-birth-month": "2",
            "password": "weakpass",
            "confirmPassword": "different",
        }

        response = client.post("/register", data=form)

        assert response.status_code == 200
        assert "Enter a valid email address." in response.text
        assert "Enter a valid date of birth in the past." in response.text
        assert "Password must be at least 8 characters" in response.text
        assert "Passwords do not match." in response.text
        assert 'value="alice"' in response.text
        assert 'value="not-an-email"' in response.text
        assert "weakpass" not in response.text
        assert upstream.requests == []

    def test_upstream_error_text_is_shown(self, client, upstream):
        upstream.on("POST", "/account/register", status=409, text="Username already taken")

        response = client.post("/register", data=VALID_REGISTRATION)

        assert response.status_code == 200
        assert "Username already taken" in response.text

    def test_upstream_error_without_text(self, client, upstream):
        upstream.on("POST", "/account/register", status=500, json={"trace": "..."})

        response = client.post("/register", data=VALID_REGISTRATION)

        assert "Registration failed. Please try again." in response.text


class TestChat:
    """Tests for the chat endpoints."""

    def test_send_message(self, signed_in, upstream):
        upstream.on("POST", "/chat", json={"chatId": 7, "message": "Hi there"})

        response = signed_in.post("/chat", json={"message": "Hello"})

        assert response.status_code == 200
        assert response.json() == {"chatId": 7, "message": "Hi there"}
        assert upstream.body("POST", "/chat") == {"message": "Hello", "chatId": None}
        request = upstream.last("POST", "/chat")
        assert request.headers[CSRF_HEADER_NAME] == CSRF_TOKEN
        assert "SESSION=upstream-abc" in request.headers["cookie"]

    def test_send_message_continues_chat(self, signed_in, upstream):
        upstream.on("POST", "/chat", json={"chatId": 7, "message": "Again"})

        signed_in.post("/chat", json={"message": "More", "chatId": 7})

        assert upstream.body("POST", "/chat") == {"message": "More", "chatId": 7}

    def test_upstream_401(self, signed_in, upstream):
        upstream.on("POST", "/chat", status=401)

        response = signed_in.post("/chat", json={"message": "Hello"})

        assert response.status_code == 401
        assert response.json() == {"error": SESSION_EXPIRED_MESSAGE}

    def test_upstream_failure(self, signed_in, upstream):
        upstream.on("POST", "/chat", status=502, text="Bad gateway")

        response = signed_in.post("/chat", json={"message": "Hello"})

        assert response.status_code == 500
        assert response.json() == {"error": CHAT_SEND_ERROR}

    def test_history(self, signed_in, upstream):
        upstream.on("GET", "/chat/chats", json=[{"id": 3, "description": "Trip planning"}])

        response = signed_in.get("/chat-history?deleted=true")

        assert response.status_code == 200
        assert "Trip planning" in response.text
        assert "/open-chat-history?chatId=3" in response.text
        assert "The chat has been deleted." in response.text

    def test_history_failure(self, signed_in, upstream):
        upstream.on("GET", "/chat/chats", status=500)

        response = signed_in.get("/chat-history")

        assert response.status_code == 200
        assert HISTORY_LOAD_ERROR in response.text

    def test_open_history(self, signed_in, upstream):
        upstream.on("GET", "/chat/messages/3", json=[
            {"sender": "user", "content": "Where should I go?"},
            {"sender": "assistant", "content": "Try the coast."},
        ])

        response = signed_in.get("/open-chat-history?chatId=3")

        assert response.status_code == 200
        assert "Try the coast." in response.text
        assert 'data-chat-id="3"' in response.text

    def test_open_history_missing_id(self, signed_in, upstream):
        response = signed_in.get("/open-chat-history")

        assert response.status_code == 400
        assert response.text == "Missing chatId parameter."
        assert upstream.requests == []

    def test_open_history_invalid_id(self, signed_in, upstream):
        response = signed_in.get("/open-chat-history?chatId=abc")

        assert response.status_code == 400
        assert response.text == "Invalid chatId parameter."
        assert upstream.requests == []

    def test_open_history_failure(self, signed_in, upstream):
        upstream.on("GET", "/chat/messages/3", status=404, text="No such chat")

        response = signed_in.get("/open-chat-history?chatId=3")

        assert response.status_code == 500
        assert response.text == "Error retrieving chat history."

    def test_delete(self, signed_in, upstream):
        upstream.on("DELETE", "/chat/chats/3", status=204)

        response = signed_in.get("/delete-chat-history?chatId=3", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/chat-history?deleted=true"
        assert upstream.calls() == [("GET", "/csrf"), ("DELETE", "/chat/chats/3")]

    def test_delete_missing_id(self, signed_in, upstream):
        response = signed_in.get("/delete-chat-history")

        assert response.status_code == 400
        assert upstream.requests == []

    def test_delete_failure(self, signed_in, upstream):
        upstream.on("DELETE", "/chat/chats/3", status=500)

        response = signed_in.get("/delete-chat-history?chatId=3")

        assert response.status_code == 500
        assert response.text == "An error occurred while deleting the chat."


class TestAccount:
    """Tests for the account page and account updates."""

    def _stub_account(self, upstream):
        upstream.on("GET", "/account/username", text="alice")
        upstream.on("GET", "/account/email", text="alice@example.com")
        upstream.on("GET", "/account/date-of-birth/day", json=17)
        upstream.on("GET", "/account/date-of-birth/month", json=5)
        upstream.on("GET", "/account/date-of-birth/year", json=1990)

    def test_account_page(self, signed_in, upstream):
        self._stub_account(upstream)

        response = signed_in.get("/account?updated=true")

        assert response.status_code == 200
        assert 'value="alice@example.com"' in response.text
        assert 'value="1990"' in response.text
        assert "Your account details have been updated." in response.text
        assert "no-store" in response.headers["cache-control"]
        assert ("GET", "/csrf") not in upstream.calls()
        assert len(upstream.requests) == 5

    def test_account_page_one_read_fails(self, signed_in, upstream):
        self._stub_account(upstream)
        upstream.on("GET", "/account/email", status=500)

        response = signed_in.get("/account")

        assert response.status_code == 200
        assert "Error retrieving account details." in response.text
        assert 'value="alice"' not in response.text

    def test_update_success(self, signed_in, upstream):
        upstream.on("POST", "/account/update", json={})

        response = signed_in.post("/account/update", data=VALID_ACCOUNT_FORM, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/account?updated=true&lang=en"
        body = upstream.body("POST", "/account/update")
        assert body["dateOfBirth"] == "1990-05-17"
        assert body["username"] == "alice"
        assert body["password"] is None

    def test_update_via_account_path(self, signed_in, upstream):
        upstream.on("POST", "/account/update", json={})

        response = signed_in.post("/account", data=VALID_ACCOUNT_FORM, follow_redirects=False)

        assert response.status_code == 302

    def test_update_password_change_must_be_complete(self, signed_in, upstream):
        form = {**VALID_ACCOUNT_FORM, "password": "Secret1!"}

        response = signed_in.post("/account/update", data=form)

        assert response.status_code == 200
        assert "Confirm your password." in response.text
        assert upstream.requests == []

    def test_update_validation_errors(self, signed_in, upstream):
        form = {**VALID_ACCOUNT_FORM, "username": "", "date-of-birth-year": "1850"}

        response = signed_in.post("/account/update", data=form)

        assert "Enter your username." in response.text
        assert "Enter a valid date of birth in the past." in response.text
        assert upstream.requests == []

    def test_update_without_session(self, client, upstream):
        response = client.post("/account/update", data=VALID_ACCOUNT_FORM)

        assert response.status_code == 401
        assert "Your session has expired. Please log in again." in response.text
        assert upstream.requests == []

    def test_update_upstream_failure(self, signed_in, upstream):
        upstream.on("POST", "/account/update", status=400, text="Email in use")

        response = signed_in.post("/account/update", data=VALID_ACCOUNT_FORM)

        assert "There was a problem updating your account. Please try again." in response.text


class TestContactSupport:
    """Tests for the contact-support page."""

    def test_banner_from_upstream(self, signed_in, upstream):
        upstream.on("GET", "/support-banner/1", json={"title": "Need help?", "content": "<p>Call 0800 000</p>"})

        response = signed_in.get("/contact-support")

        assert response.status_code == 200
        assert "Need help?" in response.text
        assert "<p>Call 0800 000</p>" in response.text

    def test_fallback_banner(self, signed_in, upstream):
        upstream.on("GET", "/support-banner/1", status=500)

        response = signed_in.get("/contact-support")

        assert response.status_code == 200
        assert FALLBACK_BANNER["titleText"] in response.text
        assert "0800 123 456" in response.text


class TestForgotPassword:
    """Tests for the forgot-password flow."""

    def _stub_reset(self, upstream):
        upstream.on("POST", "/forgot-password/enter-email", json={})
        upstream.on("POST", "/forgot-password/verify-otp", json={})
        upstream.on("POST", "/forgot-password/reset-password", json={})
        upstream.on("POST", "/forgot-password/resend-otp", json={})

    def test_full_cycle(self, client, upstream):
        self._stub_reset(upstream)

        response = client.post(
            "/forgot-password/enter-email",
            data={"email": "alice@example.com"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/forgot-password/verify-otp?lang=en"
        assert upstream.body("POST", "/forgot-password/enter-email") == {"email": "alice@example.com"}

        response = client.post(
            "/forgot-password/verify-otp",
            data={"oneTimePassword": "123456"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/forgot-password/reset-password?lang=en"
        assert upstream.body("POST", "/forgot-password/verify-otp") == {
            "email": "alice@example.com",
            "otp": "123456",
        }

        response = client.post(
            "/forgot-password/reset-password",
            data={"password": "NewSecret1!", "confirmPassword": "NewSecret1!"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/login?passwordReset=true&lang=en"
        assert upstream.body("POST", "/forgot-password/reset-password") == {
            "email": "alice@example.com",
            "otp": "123456",
            "password": "NewSecret1!",
            "confirmPassword": "NewSecret1!",
        }

    def test_reset_state_survives_a_successful_reset(self, client, upstream):
        self._stub_reset(upstream)
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})
        client.post("/forgot-password/verify-otp", data={"oneTimePassword": "123456"})
        form = {"password": "NewSecret1!", "confirmPassword": "NewSecret1!"}

        client.post("/forgot-password/reset-password", data=form)
        response = client.post("/forgot-password/reset-password", data=form, follow_redirects=False)

        assert response.status_code == 302
        assert upstream.calls().count(("POST", "/forgot-password/reset-password")) == 2

    def test_invalid_email(self, client, upstream):
        response = client.post("/forgot-password/enter-email", data={"email": "nope"})

        assert "Enter a valid email address." in response.text
        assert upstream.requests == []

    def test_enter_email_upstream_failure(self, client, upstream):
        upstream.on("POST", "/forgot-password/enter-email", status=404, text="Unknown email address")

        response = client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})

        assert "Unknown email address" in response.text

    def test_verify_without_email(self, client, upstream):
        response = client.post("/forgot-password/verify-otp", data={"oneTimePassword": "123456"})

        assert "Your reset session has expired. Please start again." in response.text
        assert upstream.requests == []

    def test_verify_blank_code(self, client, upstream):
        self._stub_reset(upstream)
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})

        response = client.post("/forgot-password/verify-otp", data={"oneTimePassword": "  "})

        assert "Enter the code we sent to your email." in response.text

    def test_verify_rejected(self, client, upstream):
        self._stub_reset(upstream)
        upstream.on("POST", "/forgot-password/verify-otp", status=400, json={"error": "expired"})
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})

        response = client.post("/forgot-password/verify-otp", data={"oneTimePassword": "123456"})

        assert "The code is invalid or has expired." in response.text

    def test_reset_without_verified_code(self, client, upstream):
        self._stub_reset(upstream)
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})
        upstream.requests.clear()

        response = client.post(
            "/forgot-password/reset-password",
            data={"password": "NewSecret1!", "confirmPassword": "NewSecret1!"},
        )

        assert "Your reset session has expired. Please start again." in response.text
        assert "NewSecret1!" not in response.text
        assert upstream.requests == []

    def test_resend_without_email(self, client, upstream):
        response = client.post("/forgot-password/resend-otp")

        assert NO_VALID_EMAIL in response.text
        assert upstream.requests == []

    def test_resend(self, client, upstream):
        self._stub_reset(upstream)
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})

        response = client.post("/forgot-password/resend-otp", follow_redirects=False)

        assert response.headers["location"] == "/forgot-password/verify-otp?sent=true&lang=en"
        assert upstream.body("POST", "/forgot-password/resend-otp") == {"email": "alice@example.com"}
        assert "We have sent you a new code." in client.get(response.headers["location"]).text

    def test_resend_failure(self, client, upstream):
        self._stub_reset(upstream)
        upstream.on("POST", "/forgot-password/resend-otp", status=500)
        client.post("/forgot-password/enter-email", data={"email": "alice@example.com"})

        response = client.post("/forgot-password/resend-otp")

        assert RESEND_ERROR in response.text
