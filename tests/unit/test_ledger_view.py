"""Tests for sw_wallet.domain.view: filter, search, group and totals."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from src.sw_common.enums import (
    DEBIT_TYPES,
    Direction,
    DirectionFilter,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from src.sw_wallet.domain.models import GroupHeader, NormalizedTransaction
from src.sw_wallet.domain.view import (
    build_view,
    categorize,
    clean_description,
    compute_totals,
    date_label,
    display_title,
    filter_transactions,
    group_by_date,
    matches_search,
    summarize,
    type_label,
)

TODAY = date(2026, 10, 19)


def _make_tx(
    tx_id: str = "t-1",
    tx_type: TransactionType = TransactionType.DEPOSIT,
    amount: str = "1000",
    status: TransactionStatus = TransactionStatus.COMPLETED,
    created_at: datetime | None = datetime(2026, 10, 19, 9, 0, tzinfo=UTC),
    metadata: dict[str, Any] | None = None,
    **kwargs: Any,
) -> NormalizedTransaction:
    direction = Direction.DEBIT if tx_type in DEBIT_TYPES else Direction.CREDIT
    return NormalizedTransaction(
        id=tx_id,
        wallet_id="w-1",
        transaction_type=tx_type,
        amount=Decimal(amount),
        direction=direction,
        balance_before=Decimal("0"),
        balance_after=Decimal("0"),
        status=status,
        metadata=metadata or {},
        created_at=created_at,
        **kwargs,
    )


class TestCategorize:
    def test_commission_linked_transfer(self) -> None:
        tx = _make_tx(tx_type=TransactionType.TRANSFER, metadata={"commissionId": "c1"})
        assert categorize(tx) is TransactionCategory.COMMISSION_PAYMENT
        assert type_label(tx) == "Commission Payment"

    def test_commission_reference_type(self) -> None:
        tx = _make_tx(tx_type=TransactionType.TRANSFER, reference_type="commission_payout")
        assert categorize(tx) is TransactionCategory.COMMISSION_PAYMENT

    def test_plain_transfer(self) -> None:
        tx = _make_tx(tx_type=TransactionType.TRANSFER)
        assert categorize(tx) is TransactionCategory.TRANSFER

    @pytest.mark.parametrize(
        ("tx_type", "category"),
        [
            (TransactionType.DEPOSIT, TransactionCategory.TOPUP),
            (TransactionType.COMMISSION, TransactionCategory.COMMISSION_EARNED),
            (TransactionType.WITHDRAWAL, TransactionCategory.WITHDRAWAL),
            (TransactionType.FEE, TransactionCategory.FEE),
            (TransactionType.REFUND, TransactionCategory.REFUND),
            (TransactionType.LOAN_REPAYMENT, TransactionCategory.LOAN),
            (TransactionType.LOAN_DISBURSEMENT, TransactionCategory.LOAN),
        ],
    )
    def test_type_buckets(self, tx_type: TransactionType, category: TransactionCategory) -> None:
        assert categorize(_make_tx(tx_type=tx_type)) is category

    def test_unknown_uncategorized(self) -> None:
        tx = _make_tx(tx_type=TransactionType.UNKNOWN)
        assert categorize(tx) is None
        assert type_label(tx) == "Transaction"


class TestDescriptions:
    def test_uuid_stripped(self) -> None:
        text = "Payment 3f2b8c1e-1234-4abc-9def-0123456789ab received"
        assert clean_description(text) == "Payment received"

    def test_id_fragments_stripped(self) -> None:
        assert clean_description("Commission ID: abc123 paid") == "Commission paid"
        assert clean_description("Top-up Transaction ID 998877") == "Top-up"

    def test_empty(self) -> None:
        assert clean_description(None) == ""

    def test_title_falls_back_to_type_label(self) -> None:
        tx = _make_tx(tx_type=TransactionType.FEE, description="ID: 42")
        assert display_title(tx) == "Fee"


class TestFilters:
    @pytest.fixture
    def feed(self) -> list[NormalizedTransaction]:
        return [
            _make_tx("t-4", TransactionType.DEPOSIT, "10000", description="Wallet top-up via MTN MoMo"),
            _make_tx(
                "t-3",
                TransactionType.TRANSFER,
                "5000",
                description="Commission payout",
                metadata={"commissionId": "c1", "employeeUserId": "u-7"},
            ),
            _make_tx("t-2", TransactionType.FEE, "2000", transaction_reference="FEE-777"),
            _make_tx("t-1", TransactionType.UNKNOWN, "50"),
        ]

    def test_all_returns_everything_in_order(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed)
        assert [t.id for t in result] == ["t-4", "t-3", "t-2", "t-1"]

    def test_direction_in(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed, DirectionFilter.IN)
        assert [t.id for t in result] == ["t-4", "t-1"]

    def test_direction_out(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed, DirectionFilter.OUT)
        assert [t.id for t in result] == ["t-3", "t-2"]

    def test_category_commission_payment(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed, category=TransactionCategory.COMMISSION_PAYMENT)
        assert [t.id for t in result] == ["t-3"]

    def test_unknown_only_under_all(self, feed: list[NormalizedTransaction]) -> None:
        for category in TransactionCategory:
            assert "t-1" not in [t.id for t in filter_transactions(feed, category=category)]

    def test_search_description_case_insensitive(self, feed: list[NormalizedTransaction]) -> None:
        assert [t.id for t in filter_transactions(feed, query="  momo ")] == ["t-4"]

    def test_search_reference(self, feed: list[NormalizedTransaction]) -> None:
        assert [t.id for t in filter_transactions(feed, query="fee-777")] == ["t-2"]

    def test_search_counterparty_name(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed, query="aline", names={"u-7": "Aline Mukamana"})
        assert [t.id for t in result] == ["t-3"]

    def test_blank_query_matches_all(self, feed: list[NormalizedTransaction]) -> None:
        assert len(filter_transactions(feed, query="   ")) == 4

    def test_filters_compose(self, feed: list[NormalizedTransaction]) -> None:
        result = filter_transactions(feed, DirectionFilter.OUT, query="commission")
        assert [t.id for t in result] == ["t-3"]

    def test_input_not_mutated(self, feed: list[NormalizedTransaction]) -> None:
        before = list(feed)
        filter_transactions(feed, DirectionFilter.OUT, query="x")
        assert feed == before

    def test_search_metadata_name(self) -> None:
        tx = _make_tx(metadata={"employeeName": "Eric"})
        assert matches_search(tx, "eric")


class TestGrouping:
    def test_labels(self) -> None:
        assert date_label(datetime(2026, 10, 19, 23, 0, tzinfo=UTC), TODAY) == "Today"
        assert date_label(datetime(2026, 10, 18, 1, 0, tzinfo=UTC), TODAY) == "Yesterday"
        assert date_label(datetime(2026, 10, 1, 12, 0, tzinfo=UTC), TODAY) == "Oct 1, 2026"
        assert date_label(None, TODAY) == "Unknown date"

    def test_local_timezone_shifts_bucket(self) -> None:
        kigali = timezone(timedelta(hours=2))
        late = datetime(2026, 10, 18, 23, 0, tzinfo=UTC)  # already the 19th in Kigali
        assert date_label(late, TODAY, kigali) == "Today"

    def test_header_before_each_run(self) -> None:
        feed = [
            _make_tx("a", created_at=datetime(2026, 10, 19, 10, 0, tzinfo=UTC)),
            _make_tx("b", created_at=datetime(2026, 10, 19, 8, 0, tzinfo=UTC)),
            _make_tx("c", created_at=datetime(2026, 10, 18, 8, 0, tzinfo=UTC)),
            _make_tx("d", created_at=datetime(2026, 10, 1, 8, 0, tzinfo=UTC)),
        ]
        rows = group_by_date(feed, TODAY)
        labels = [r.label if isinstance(r, GroupHeader) else r.id for r in rows]
        assert labels == ["Today", "a", "b", "Yesterday", "c", "Oct 1, 2026", "d"]

    def test_non_contiguous_same_day_gets_new_header(self) -> None:
        feed = [
            _make_tx("a", created_at=datetime(2026, 10, 19, 10, 0, tzinfo=UTC)),
            _make_tx("b", created_at=datetime(2026, 10, 18, 8, 0, tzinfo=UTC)),
            _make_tx("c", created_at=datetime(2026, 10, 19, 8, 0, tzinfo=UTC)),
        ]
        headers = [r.label for r in group_by_date(feed, TODAY) if isinstance(r, GroupHeader)]
        assert headers == ["Today", "Yesterday", "Today"]

    def test_empty(self) -> None:
        assert group_by_date([], TODAY) == []


class TestTotals:
    def test_compute_totals(self) -> None:
        totals = compute_totals(
            [
                _make_tx(tx_type=TransactionType.DEPOSIT, amount="10000"),
                _make_tx(tx_type=TransactionType.FEE, amount="2000"),
                _make_tx(tx_type=TransactionType.TRANSFER, amount="500"),
            ]
        )
        assert totals.credits == Decimal("10000")
        assert totals.debits == Decimal("2500")
        assert totals.net == Decimal("7500")

    def test_summary_completed_only(self) -> None:
        summary = summarize(
            [
                _make_tx(tx_type=TransactionType.DEPOSIT, amount="10000"),
                _make_tx(tx_type=TransactionType.WITHDRAWAL, amount="3000"),
                _make_tx(tx_type=TransactionType.FEE, amount="200", status=TransactionStatus.PENDING),
                _make_tx(tx_type=TransactionType.DEPOSIT, amount="999", status=TransactionStatus.FAILED),
            ]
        )
        assert summary.total_received == Decimal("10000")
        assert summary.total_sent == Decimal("3000")
        assert summary.pending_count == 1


class TestBuildView:
    def test_totals_follow_filters(self) -> None:
        feed = [
            _make_tx("a", TransactionType.DEPOSIT, "10000"),
            _make_tx("b", TransactionType.FEE, "2000"),
        ]
        everything = build_view(feed, TODAY)
        outgoing = build_view(feed, TODAY, direction=DirectionFilter.OUT)

        assert everything.totals.credits == Decimal("10000")
        assert outgoing.totals.credits == Decimal("0")
        assert outgoing.totals.debits == Decimal("2000")
        assert [t.id for t in outgoing.transactions] == ["b"]
        assert isinstance(outgoing.rows[0], GroupHeader)

    def test_empty_result(self) -> None:
        view = build_view([_make_tx()], TODAY, query="nothing matches this")
        assert view.rows == []
        assert view.totals.net == Decimal("0")
