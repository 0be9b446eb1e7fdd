"""Tests for PaymentsService: history, status reads and the bounded poller."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sw_common.enums import PaymentStatus
from src.sw_common.errors import NetworkError, PaymentTimeoutError, UpstreamError
from src.sw_gateway.session import WalletSession
from src.sw_payments.application.service import PaymentsService
from src.sw_payments.domain.models import Payment
from tests.fakes import FakeRemote


def _payment_payload(status: str) -> dict:
    return {"id": "pay-1", "amount": "15000", "status": status, "method": "mtn_momo"}


def _mock_api(*responses: object) -> AsyncMock:
    api = AsyncMock()
    api.get.side_effect = list(responses)
    return api


class TestPaymentModel:
    def test_from_payload(self) -> None:
        payment = Payment.from_payload(
            {
                "data": {
                    "id": "pay-1",
                    "amount": 15000,
                    "currency": "RWF",
                    "method": "airtel_money",
                    "status": "FAILED",
                    "type": "wallet_topup",
                    "failureReason": "Insufficient funds",
                    "createdAt": "2026-10-19T08:00:00Z",
                }
            }
        )
        assert payment.id == "pay-1"
        assert payment.amount == Decimal("15000")
        assert payment.status is PaymentStatus.FAILED
        assert payment.is_terminal
        assert payment.failure_reason == "Insufficient funds"
        assert payment.created_at == datetime(2026, 10, 19, 8, 0, tzinfo=UTC)

    def test_unknown_status_is_pending(self) -> None:
        payment = Payment.from_payload({"id": "p", "status": "queued"})
        assert payment.status is PaymentStatus.PENDING
        assert not payment.is_terminal

    def test_non_dict_payload(self) -> None:
        payment = Payment.from_payload([], default_currency="USD")  # type: ignore[arg-type]
        assert payment.id == ""
        assert payment.currency == "USD"


class TestPollStatus:
    async def test_resolves_on_terminal_status(self) -> None:
        api = _mock_api(
            _payment_payload("pending"),
            _payment_payload("processing"),
            _payment_payload("completed"),
        )
        updates = MagicMock()

        payment = await PaymentsService(api).poll_status("pay-1", on_update=updates, interval=0)

        assert payment.status is PaymentStatus.COMPLETED
        assert api.get.await_count == 3
        assert updates.call_count == 3

    async def test_exhaustion_raises_timeout(self) -> None:
        api = _mock_api(*[_payment_payload("pending")] * 3)
        with pytest.raises(PaymentTimeoutError) as exc_info:
            await PaymentsService(api).poll_status("pay-1", max_attempts=3, interval=0)
        assert "pay-1" in exc_info.value.message
        assert api.get.await_count == 3

    async def test_transient_errors_retried(self) -> None:
        api = _mock_api(NetworkError(), UpstreamError(502, "Bad Gateway"), _payment_payload("failed"))
        payment = await PaymentsService(api).poll_status("pay-1", interval=0)
        assert payment.status is PaymentStatus.FAILED

    async def test_last_error_reraised_on_exhaustion(self) -> None:
        api = _mock_api(_payment_payload("pending"), NetworkError())
        with pytest.raises(NetworkError):
            await PaymentsService(api).poll_status("pay-1", max_attempts=2, interval=0)

    async def test_invalid_attempts(self) -> None:
        with pytest.raises(ValueError):
            await PaymentsService(AsyncMock()).poll_status("pay-1", max_attempts=0)


class TestAgainstRemote:
    async def test_check_status(self, session: WalletSession, remote: FakeRemote) -> None:
        payment = await session.payments.check_status("pay-42")
        assert payment.id == "pay-42"
        assert payment.status is PaymentStatus.COMPLETED
        assert remote.calls["GET:/payments/pay-42/status"] == 1

    async def test_poll_until_completed(self, session: WalletSession, remote: FakeRemote) -> None:
        remote.payment_statuses = ["pending", "processing", "completed"]
        payment = await session.payments.poll_status("pay-42", interval=0)
        assert payment.status is PaymentStatus.COMPLETED
        assert remote.calls["GET:/payments/pay-42/status"] == 3

    async def test_history(self) -> None:
        api = AsyncMock()
        api.get.return_value = {"payments": [_payment_payload("completed"), "junk"], "total": 7}

        payments, total = await PaymentsService(api).get_payment_history(limit=10, offset=20)

        api.get.assert_awaited_once_with("/payments/history", params={"limit": 10, "offset": 20})
        assert [p.id for p in payments] == ["pay-1"]
        assert total == 7


class TestConfiguredDefaults:
    async def test_instance_limits_used_when_not_overridden(self) -> None:
        api = _mock_api(*[_payment_payload("processing")] * 2)
        service = PaymentsService(api, max_attempts=2, interval=0)
        with pytest.raises(PaymentTimeoutError):
            await service.poll_status("pay-1")
        assert api.get.await_count == 2
