"""Unit tests for order creation (validate-then-debit).

Covers:
- Snapshot of name / unit price / first image and server-side totals.
- Stock debited per size; history and outbox written in the same transaction.
- Empty cart, unknown product, unknown size and short stock rejections.
- All-or-nothing: a failing second item leaves the first item untouched.
- Duplicate lines for the same size are summed before the check.
- Idempotency-Key replay.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    EmptyCart,
    IdempotencyKeyReused,
    InsufficientStock,
    ProductNotFound,
)
from modules.orders.models import Order, OrderStatusHistory

pytestmark = pytest.mark.unit


def _order_dto(user, *lines, key=None, payment_method=None):
    return CreateOrderDTO(
        user_id=user.pk,
        user_name="Asha Verma",
        user_email=user.email,
        items=[
            CreateOrderItemDTO(product_id=product.id, selected_size=size, quantity=qty)
            for product, size, qty in lines
        ],
        idempotency_key=key,
        payment_method=payment_method,
    )


class TestCreateOrder:
    def test_snapshot_and_totals(self, order_service, shopper, make_product):
        tee = make_product(
            "Tee",
            price=Decimal("499.99"),
            sizes={"M": 5},
            images=["https://cdn.example.com/tee-1.jpg", "https://cdn.example.com/tee-2.jpg"],
        )

        order, created = order_service.create_order(_order_dto(shopper, (tee, "m", 2)))

        assert created is True
        assert order.status == OrderStatus.PENDING
        assert order.order_number.startswith("ORD-")
        assert order.subtotal == Decimal("999.98")
        assert order.gst == Decimal("180.00")
        assert order.total == Decimal("1179.98")
        assert order.payment_method == "COD / Stripe"
        assert order.user_name == "Asha Verma"

        item = order.items.get()
        assert (item.name, item.price, item.quantity, item.selected_size) == (
            "Tee",
            Decimal("499.99"),
            2,
            "M",
        )
        assert item.image == "https://cdn.example.com/tee-1.jpg"

    def test_gst_rounds_half_up(self, order_service, shopper, make_product):
        tee = make_product("Tee", price=Decimal("0.25"), sizes={"M": 5})
        order, _ = order_service.create_order(_order_dto(shopper, (tee, "M", 1)))
        # 0.25 * 0.18 = 0.045
        assert order.gst == Decimal("0.05")
        assert order.total == Decimal("0.30")

    def test_debits_stock(self, order_service, shopper, make_product, stock_of):
        tee = make_product("Tee", sizes={"M": 3, "L": 2})
        order_service.create_order(_order_dto(shopper, (tee, "M", 2), (tee, "L", 1)))
        assert stock_of(tee, "M") == 1
        assert stock_of(tee, "L") == 1

    def test_history_and_outbox_written(self, order_service, shopper, make_product):
        tee = make_product("Tee", sizes={"M": 3})
        order, _ = order_service.create_order(_order_dto(shopper, (tee, "M", 1)))

        history = OrderStatusHistory.objects.get(order=order)
        assert history.old_status is None
        assert history.new_status == OrderStatus.PENDING

        event = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert event.event_type == "OrderCreated"
        assert event.payload["order_number"] == order.order_number
        assert event.payload["total"] == str(order.total)

    def test_payment_method_is_kept(self, order_service, shopper, make_product):
        tee = make_product("Tee")
        order, _ = order_service.create_order(
            _order_dto(shopper, (tee, "M", 1), payment_method="UPI")
        )
        assert order.payment_method == "UPI"


class TestCreateOrderRejections:
    def test_empty_cart(self, order_service, shopper):
        with pytest.raises(EmptyCart, match="Cart is empty"):
            order_service.create_order(_order_dto(shopper))

    def test_unknown_product(self, order_service, shopper):
        dto = CreateOrderDTO(
            user_id=shopper.pk,
            items=[CreateOrderItemDTO(product_id=uuid4(), selected_size="M", quantity=1)],
        )
        with pytest.raises(ProductNotFound, match="Product not found"):
            order_service.create_order(dto)

    def test_short_stock_names_the_product(self, order_service, shopper, make_product):
        tee = make_product("Tee", sizes={"M": 1})
        with pytest.raises(InsufficientStock, match="Tee stock insufficient"):
            order_service.create_order(_order_dto(shopper, (tee, "M", 2)))

    def test_unknown_size_is_insufficient_stock(self, order_service, shopper, make_product):
        tee = make_product("Tee", sizes={"M": 5})
        with pytest.raises(InsufficientStock):
            order_service.create_order(_order_dto(shopper, (tee, "XXL", 1)))

    def test_all_or_nothing(self, order_service, shopper, make_product, stock_of):
        tee = make_product("Tee", sizes={"M": 5})
        hoodie = make_product("Hoodie", sizes={"L": 0})

        with pytest.raises(InsufficientStock, match="Hoodie stock insufficient"):
            order_service.create_order(_order_dto(shopper, (tee, "M", 2), (hoodie, "L", 1)))

        assert stock_of(tee, "M") == 5
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0

    def test_duplicate_lines_are_summed(self, order_service, shopper, make_product, stock_of):
        tee = make_product("Tee", sizes={"M": 3})
        with pytest.raises(InsufficientStock):
            order_service.create_order(_order_dto(shopper, (tee, "M", 2), (tee, "m", 2)))
        assert stock_of(tee, "M") == 3


class TestIdempotency:
    def test_replay_returns_existing_order(self, order_service, shopper, make_product, stock_of):
        tee = make_product("Tee", sizes={"M": 3})
        first, created = order_service.create_order(
            _order_dto(shopper, (tee, "M", 1), key="checkout-1")
        )
        again, replay_created = order_service.create_order(
            _order_dto(shopper, (tee, "M", 1), key="checkout-1")
        )

        assert created is True
        assert replay_created is False
        assert again.id == first.id
        assert stock_of(tee, "M") == 2

    def test_key_of_another_user_rejected(
        self, order_service, shopper, other_shopper, make_product
    ):
        tee = make_product("Tee", sizes={"M": 3})
        order_service.create_order(_order_dto(shopper, (tee, "M", 1), key="shared-key"))
        with pytest.raises(IdempotencyKeyReused):
            order_service.create_order(
                _order_dto(other_shopper, (tee, "M", 1), key="shared-key")
            )
