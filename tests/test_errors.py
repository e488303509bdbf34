"""Tests for error classification and user-facing messages."""

import httpx
import pytest

from costprint.errors import (
    NETWORK_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    ApiError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
    describe_error,
    error_for_response,
)


class TestErrorForResponse:
    def test_message_key(self):
        error = error_for_response(httpx.Response(404, json={"message": "No such job"}))
        assert isinstance(error, NotFoundError)
        assert error.message == "No such job"

    def test_error_key_preferred(self):
        error = error_for_response(
            httpx.Response(400, json={"error": "Bad input", "detail": "quantity"})
        )
        assert isinstance(error, ValidationError)
        assert error.message == "Bad input"

    def test_non_dict_json_falls_back_to_text(self):
        error = error_for_response(httpx.Response(500, json=["oops"]))
        assert isinstance(error, ServerError)
        assert error.message == '["oops"]'

    def test_all_errors_are_api_errors(self):
        error = error_for_response(httpx.Response(401))
        assert isinstance(error, AuthenticationError)
        assert isinstance(error, ApiError)
        assert str(error) == "HTTP 401"


class TestDescribeError:
    FALLBACK = "Failed to load jobs"

    def test_network(self):
        assert describe_error(NetworkError("down"), self.FALLBACK) == NETWORK_MESSAGE

    def test_unauthorized(self):
        assert (
            describe_error(AuthenticationError("expired", 401), self.FALLBACK)
            == UNAUTHORIZED_MESSAGE
        )

    def test_validation_uses_page_message(self):
        exc = ValidationError("quantity must be positive", 400)
        assert describe_error(exc, self.FALLBACK, validation_message="Check inputs") == (
            "Check inputs"
        )
        assert describe_error(exc, self.FALLBACK) == "quantity must be positive"

    def test_server_error_uses_fallback(self):
        assert describe_error(ServerError("stack trace", 500), self.FALLBACK) == self.FALLBACK

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (ApiError("Conflict", 409), "Conflict"),
            (ApiError("", 409), FALLBACK),
            (RuntimeError("boom"), FALLBACK),
        ],
    )
    def test_other_errors(self, exc, expected):
        assert describe_error(exc, self.FALLBACK) == expected
