"""Unit tests for admin status writes and cancellation restock."""

from __future__ import annotations

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderStatusDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.models import OrderStatusHistory
from modules.products.models import Product, ProductSize

pytestmark = pytest.mark.unit


@pytest.fixture()
def tee(make_product):
    return make_product("Tee", sizes={"M": 5, "L": 2})


@pytest.fixture()
def pending_order(order_service, shopper, tee):
    order, _ = order_service.create_order(
        CreateOrderDTO(
            user_id=shopper.pk,
            user_name="Asha Verma",
            items=[
                CreateOrderItemDTO(product_id=tee.id, selected_size="M", quantity=2),
                CreateOrderItemDTO(product_id=tee.id, selected_size="L", quantity=1),
            ],
        )
    )
    return order


def _set_status(service, order, status, admin=None, notes=""):
    return service.update_status(
        UpdateOrderStatusDTO(
            order_id=order.id,
            status=status,
            notes=notes,
            changed_by_id=admin.pk if admin else None,
        )
    )


class TestCancellation:
    def test_cancel_restores_stock(self, order_service, pending_order, tee, stock_of):
        assert stock_of(tee, "M") == 3

        order = _set_status(order_service, pending_order, "Cancelled")

        assert order.status == OrderStatus.CANCELLED
        assert stock_of(tee, "M") == 5
        assert stock_of(tee, "L") == 2

    def test_second_cancel_does_not_credit_again(
        self, order_service, pending_order, tee, stock_of
    ):
        _set_status(order_service, pending_order, "Cancelled")
        _set_status(order_service, pending_order, "Cancelled")
        assert stock_of(tee, "M") == 5

    def test_completed_order_can_be_cancelled(
        self, order_service, pending_order, tee, stock_of
    ):
        _set_status(order_service, pending_order, "Completed")
        assert stock_of(tee, "M") == 3

        _set_status(order_service, pending_order, "Cancelled")
        assert stock_of(tee, "M") == 5

    def test_reopening_cancelled_order_does_not_debit(
        self, order_service, pending_order, tee, stock_of
    ):
        _set_status(order_service, pending_order, "Cancelled")
        order = _set_status(order_service, pending_order, "Pending")

        assert order.status == OrderStatus.PENDING
        assert stock_of(tee, "M") == 5

    def test_deleted_product_is_skipped(self, order_service, pending_order, tee, make_product):
        other = make_product("Hoodie", sizes={"S": 1})
        Product.objects.filter(id=tee.id).delete()

        order = _set_status(order_service, pending_order, "Cancelled")

        assert order.status == OrderStatus.CANCELLED
        assert all(item.product_id is None for item in order.items.all())
        assert ProductSize.objects.get(product=other).quantity == 1

    def test_removed_size_is_recreated(self, order_service, pending_order, tee, stock_of):
        ProductSize.objects.filter(product=tee, size="L").delete()

        _set_status(order_service, pending_order, "Cancelled")

        assert stock_of(tee, "L") == 1

    def test_cancel_queues_cancelled_event(self, order_service, pending_order):
        _set_status(order_service, pending_order, "Cancelled")

        event_types = OutboxEvent.objects.filter(
            aggregate_id=str(pending_order.id)
        ).values_list("event_type", flat=True)
        assert sorted(event_types) == ["OrderCancelled", "OrderCreated", "OrderStatusChanged"]

    def test_repeated_cancel_queues_no_second_cancelled_event(
        self, order_service, pending_order
    ):
        _set_status(order_service, pending_order, "Cancelled")
        _set_status(order_service, pending_order, "Cancelled")
        assert OutboxEvent.objects.filter(event_type="OrderCancelled").count() == 1


class TestStatusWrites:
    def test_status_is_case_insensitive(self, order_service, pending_order):
        order = _set_status(order_service, pending_order, "completed")
        assert order.status == OrderStatus.COMPLETED

    def test_history_records_transition(self, order_service, pending_order, admin_user):
        _set_status(order_service, pending_order, "Completed", admin=admin_user, notes="shipped")

        entry = OrderStatusHistory.objects.get(
            order=pending_order, new_status=OrderStatus.COMPLETED
        )
        assert entry.old_status == OrderStatus.PENDING
        assert entry.new_status == OrderStatus.COMPLETED
        assert entry.notes == "shipped"
        assert entry.user_id == admin_user.pk

    def test_invalid_status_rejected(self, order_service, pending_order, tee, stock_of):
        with pytest.raises(InvalidOrderStatus):
            _set_status(order_service, pending_order, "Shipped")
        pending_order.refresh_from_db()
        assert pending_order.status == OrderStatus.PENDING
        assert stock_of(tee, "M") == 3

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound, match="Order not found"):
            order_service.update_status(
                UpdateOrderStatusDTO(
                    order_id="0190f7a1-0000-7000-8000-000000000000", status="Completed"
                )
            )


class TestOrderQueries:
    def test_pending_count(self, order_service, pending_order):
        assert order_service.pending_count() == 1
        _set_status(order_service, pending_order, "Completed")
        assert order_service.pending_count() == 0

    def test_list_filters_by_status(self, order_service, pending_order):
        assert [o.id for o in order_service.list_orders("pending")] == [pending_order.id]
        assert order_service.list_orders("Cancelled") == []

    def test_list_rejects_unknown_status(self, order_service):
        with pytest.raises(InvalidOrderStatus):
            order_service.list_orders("Lost")

    def test_list_user_orders(self, order_service, pending_order, shopper, other_shopper):
        assert [o.id for o in order_service.list_user_orders(shopper.pk)] == [pending_order.id]
        assert order_service.list_user_orders(other_shopper.pk) == []
