"""Tests for sw_common.errors and sw_common.response."""

from types import SimpleNamespace

from src.sw_common.errors import (
    AppError,
    InvalidCredentialsError,
    NetworkError,
    PaymentTimeoutError,
    SessionExpiredError,
    UpstreamError,
    WalletNotFoundError,
)
from src.sw_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=1003, message="Bad login", http_status=401)
        assert err.http_status == 401

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)
        assert str(err) == "test"


class TestSpecificErrors:
    def test_invalid_credentials_default_message(self) -> None:
        err = InvalidCredentialsError()
        assert err.code == 1003
        assert err.http_status == 401
        assert err.message == "Invalid email or password"

    def test_invalid_credentials_carries_server_message(self) -> None:
        err = InvalidCredentialsError("Account locked")
        assert err.message == "Account locked"

    def test_session_expired(self) -> None:
        err = SessionExpiredError()
        assert err.code == 1006
        assert err.http_status == 401
        assert "login again" in err.message

    def test_wallet_not_found(self) -> None:
        err = WalletNotFoundError()
        assert err.code == 2002
        assert err.http_status == 404

    def test_payment_timeout(self) -> None:
        err = PaymentTimeoutError("pay-9", attempts=20)
        assert err.code == 6001
        assert err.http_status == 504
        assert "pay-9" in err.message
        assert "20" in err.message

    def test_network(self) -> None:
        err = NetworkError()
        assert err.code == 9003
        assert err.http_status == 503

    def test_upstream_keeps_remote_status(self) -> None:
        err = UpstreamError(500, "Internal Server Error")
        assert err.code == 9004
        assert err.http_status == 502
        assert err.status_code == 500

    def test_auth_errors_are_distinct(self) -> None:
        assert not isinstance(SessionExpiredError(), InvalidCredentialsError)
        assert not isinstance(InvalidCredentialsError(), SessionExpiredError)


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response(data={"count": 3})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"count": 3}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(1006, "Session expired. Please login again.")
        assert resp.code == 1006
        assert resp.data is None

    def test_request_id_taken_from_request_state(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace(request_id="req_abc"))
        resp = success_response(data=None, request=request)
        assert resp.request_id == "req_abc"

    def test_request_without_request_id_gets_fresh_one(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace())
        resp = error_response(9003, "offline", request)
        assert resp.request_id.startswith("req_")

    def test_timestamp_is_iso(self) -> None:
        resp = ApiResponse()
        assert "T" in resp.timestamp
        assert resp.timestamp.endswith("+00:00")
