"""Unit tests for MaterializeSubscriptionOrder use case

Tests cover:
- Order creation with price snapshot and tax breakdown
- Idempotency (existing order returned, zero writes)
- Product re-validation (missing, out of stock, not subscribable)
- Product lookup timeout
- Concurrent duplicate insert resolved as ALREADY_EXISTS
"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.generation.materialize_order import MaterializeSubscriptionOrder
from src.app.use_cases.generation.dtos import MaterializeOutcome
from src.domain.errors import DuplicateOrderError
from src.domain.order import OrderStatus, OrderType, subscription_order_id
from tests.fixtures.factories import make_order, make_product, make_subscription

REFERENCE_DATE = date(2024, 3, 5)


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.find_by_subscription_and_date = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda order: order)
    repo.get_last_order_sequence = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_product_repo():
    products = {"prod_milk": make_product()}
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda product_id: products.get(product_id))
    repo.products = products
    return repo


@pytest.fixture
def mock_counter_repo():
    repo = MagicMock()
    repo.increment = AsyncMock(return_value=7)
    repo.initialize = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def materialize_use_case(mock_uow, mock_order_repo, mock_product_repo, mock_counter_repo):
    return MaterializeSubscriptionOrder(
        uow=mock_uow,
        order_repo=mock_order_repo,
        product_repo=mock_product_repo,
        order_counter_repo=mock_counter_repo,
        product_lookup_timeout=0.5,
    )


@pytest.mark.asyncio
class TestMaterializeCreated:
    """Test successful order creation"""

    async def test_creates_pending_subscription_order(
        self, materialize_use_case, mock_order_repo, mock_uow
    ):
        """
        Given an active subscription for 2 x product at 100 + 9% + 9%
        When the order is materialized
        Then a PENDING subscription order of 236 is created and committed
        """
        # Arrange
        subscription = make_subscription()

        # Act
        result = await materialize_use_case.execute(subscription, REFERENCE_DATE)

        # Assert
        assert result.is_ok()
        assert result.value.outcome == MaterializeOutcome.CREATED
        assert result.value.total_amount == Decimal("236.00")
        assert result.value.order_number == "ORD-2024-00007"

        order = mock_order_repo.create.call_args[0][0]
        assert order.id == subscription_order_id(subscription.id, REFERENCE_DATE)
        assert order.type == OrderType.SUBSCRIPTION
        assert order.subscription_id == subscription.id
        assert order.status == OrderStatus.PENDING
        assert order.scheduled_delivery_date == REFERENCE_DATE
        assert order.subtotal == Decimal("200")
        assert order.cgst == Decimal("18")
        assert order.sgst == Decimal("18")
        assert order.total_tax == Decimal("36")
        assert order.total_amount == Decimal("236")
        assert order.platform_fee == 0
        assert order.delivery_fee == 0
        assert order.delivery_address == subscription.delivery_address
        mock_uow.commit.assert_awaited_once()

    async def test_snapshots_item_prices(self, materialize_use_case, mock_order_repo):
        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_ok()
        item = mock_order_repo.create.call_args[0][0].line_items()[0]
        assert item.product_id == "prod_milk"
        assert item.product_name == "Toned Milk 1L"
        assert item.quantity == 2
        assert item.price_excluding_tax == Decimal("100")
        assert item.cgst_percent == Decimal("9")
        assert item.sgst_percent == Decimal("9")

    async def test_seeds_counter_on_first_order_of_year(
        self, materialize_use_case, mock_order_repo, mock_counter_repo
    ):
        """Test missing counter is initialized from the last existing order number"""
        mock_counter_repo.increment.return_value = None
        mock_order_repo.get_last_order_sequence.return_value = 41
        mock_counter_repo.initialize.return_value = 42

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.value.order_number == "ORD-2024-00042"
        mock_counter_repo.initialize.assert_awaited_once_with(2024, 42)


@pytest.mark.asyncio
class TestMaterializeIdempotency:
    """Test existing orders are never duplicated"""

    async def test_existing_order_is_returned_without_writes(
        self, materialize_use_case, mock_order_repo, mock_counter_repo, mock_product_repo, mock_uow
    ):
        existing = make_order(order_id="existing", subscription_id="sub_1", scheduled_delivery_date=REFERENCE_DATE)
        mock_order_repo.find_by_subscription_and_date.return_value = existing

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_ok()
        assert result.value.outcome == MaterializeOutcome.ALREADY_EXISTS
        assert result.value.order_id == "existing"
        mock_product_repo.get_by_id.assert_not_awaited()
        mock_counter_repo.increment.assert_not_awaited()
        mock_order_repo.create.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_duplicate_insert_resolves_to_already_exists(
        self, materialize_use_case, mock_order_repo, mock_uow
    ):
        """
        Given a concurrent run inserted the same delivery first
        When the insert is rejected as duplicate
        Then the existing order is returned as ALREADY_EXISTS
        """
        winner = make_order(order_id="winner", subscription_id="sub_1", scheduled_delivery_date=REFERENCE_DATE)
        mock_order_repo.find_by_subscription_and_date.side_effect = [None, winner]
        mock_order_repo.create.side_effect = DuplicateOrderError("winner")

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_ok()
        assert result.value.outcome == MaterializeOutcome.ALREADY_EXISTS
        assert result.value.order_id == "winner"
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestMaterializeProductValidation:
    """Test product re-validation at materialization time"""

    @pytest.mark.parametrize(
        "product, reason_fragment",
        [
            (None, "not found"),
            (make_product(in_stock=False), "out of stock"),
            (make_product(allow_subscription=False), "does not support subscription"),
        ],
    )
    async def test_unavailable_product_writes_nothing(
        self, materialize_use_case, mock_product_repo, mock_order_repo, mock_counter_repo, mock_uow,
        product, reason_fragment
    ):
        if product is None:
            mock_product_repo.products.clear()
        else:
            mock_product_repo.products["prod_milk"] = product

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_err()
        assert result.error.code == "PRODUCT_UNAVAILABLE"
        assert result.error.context["product_id"] == "prod_milk"
        assert reason_fragment in result.error.reason
        mock_counter_repo.increment.assert_not_awaited()
        mock_order_repo.create.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_one_bad_product_fails_whole_order(
        self, materialize_use_case, mock_product_repo, mock_order_repo
    ):
        mock_product_repo.products["prod_curd"] = make_product("prod_curd", in_stock=False)
        subscription = make_subscription(items=[("prod_milk", 1), ("prod_curd", 1)])

        result = await materialize_use_case.execute(subscription, REFERENCE_DATE)

        assert result.error.code == "PRODUCT_UNAVAILABLE"
        assert result.error.context["product_id"] == "prod_curd"
        mock_order_repo.create.assert_not_awaited()

    async def test_slow_product_lookup_times_out(
        self, materialize_use_case, mock_product_repo, mock_order_repo
    ):
        async def slow_lookup(product_id):
            await asyncio.sleep(5)

        mock_product_repo.get_by_id.side_effect = slow_lookup

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_err()
        assert result.error.code == "PRODUCT_LOOKUP_TIMEOUT"
        mock_order_repo.create.assert_not_awaited()

    async def test_empty_items_is_invalid(self, materialize_use_case):
        result = await materialize_use_case.execute(make_subscription(items=[]), REFERENCE_DATE)

        assert result.error.code == "INVALID_SUBSCRIPTION"

    async def test_unexpected_error_rolls_back(self, materialize_use_case, mock_order_repo, mock_uow):
        mock_order_repo.create.side_effect = RuntimeError("connection reset")

        result = await materialize_use_case.execute(make_subscription(), REFERENCE_DATE)

        assert result.is_err()
        assert result.error.code == "MATERIALIZE_FAILED"
        assert "connection reset" in result.error.reason
        mock_uow.rollback.assert_awaited_once()
