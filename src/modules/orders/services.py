"""Order service layer (Use Cases): the order state machine.

Orchestrates order creation and status management.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- An empty cart is rejected.
- Creation is validate-then-apply: every line item is checked against
  the stock ledger (quantities for the same product/size summed first)
  before any debit happens; any failure rolls the whole order back.
- Line items are snapshots (name, unit price, first image) and totals
  are computed here; client-sent amounts are ignored.
- A lost debit race is retried a bounded number of times, then reported
  as insufficient stock.
- Any status may be set to any status.  Moving into ``Cancelled`` from a
  non-cancelled status credits every line item back exactly once; the
  order row lock makes concurrent cancellations restock once.
- Every status write is recorded in the history and emitted as events.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, List, Optional, Tuple
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    EmptyCart,
    IdempotencyKeyReused,
    InsufficientStock,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.products.exceptions import StockRaceLost
from modules.products.ledger import Availability, merge_requests
from modules.products.models import normalize_size

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, UpdateOrderStatusDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.ledger import StockLedger
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the stock ledger via constructor
    injection (DIP).  ``gst_rate`` and ``max_debit_retries`` default to
    the ``GST_RATE`` and ``LEDGER_DEBIT_MAX_RETRIES`` settings.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        ledger: StockLedger,
        gst_rate: Optional[Decimal] = None,
        max_debit_retries: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._ledger = ledger
        self._gst_rate = Decimal(
            str(gst_rate if gst_rate is not None else settings.GST_RATE)
        )
        self._max_debit_retries = (
            max_debit_retries
            if max_debit_retries is not None
            else settings.LEDGER_DEBIT_MAX_RETRIES
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Tuple[Order, bool]:
        """Create a Pending order and debit its stock.

        Returns ``(order, created)``; ``created`` is ``False`` when the
        idempotency key matched an existing order of the same user.

        Steps:
        1. Idempotency check.
        2. Check every merged ``(product, size)`` request (no writes).
        3. Persist the order with item snapshots and computed totals.
        4. Debit each request, sorted by product id then size.
        5. Record initial history and queue ``OrderCreated``.

        Raises:
            EmptyCart: no line items.
            ProductNotFound: a product does not exist.
            InsufficientStock: a size is missing or short on stock.
            IdempotencyKeyReused: the key belongs to another user's order.
        """
        log = logger.bind(user_id=str(dto.user_id))
        log.info("order.creation_started", item_count=len(dto.items))

        # 1. Idempotency check
        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                if existing.user_id != dto.user_id:
                    log.warning("order.idempotency_key_reused")
                    raise IdempotencyKeyReused("Idempotency key already used")
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing, False

        if not dto.items:
            raise EmptyCart("Cart is empty")

        # 2. Validate phase: nothing is written until every item passes
        requested = merge_requests(
            [(item.product_id, item.selected_size, item.quantity) for item in dto.items]
        )
        products: dict[UUID, Product] = {}
        for (product_id, size), quantity in requested.items():
            product = products.get(product_id) or self._product_repo.get_by_id(
                str(product_id)
            )
            if product is None:
                log.warning("order.product_not_found", product_id=str(product_id))
                raise ProductNotFound("Product not found")
            products[product_id] = product

            availability = self._ledger.check_availability(product_id, size, quantity)
            if availability is Availability.PRODUCT_NOT_FOUND:
                raise ProductNotFound("Product not found")
            if not availability.ok:
                log.warning(
                    "order.stock_check_failed",
                    product_id=str(product_id),
                    size=size,
                    requested=quantity,
                    reason=availability.value,
                )
                raise InsufficientStock(f"{product.name} stock insufficient")

        # 3. Persist order + snapshots
        items = []
        subtotal = Decimal("0.00")
        for item in dto.items:
            product = products[item.product_id]
            subtotal += product.price * item.quantity
            items.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "price": product.price,
                    "quantity": item.quantity,
                    "selected_size": normalize_size(item.selected_size),
                    "image": product.primary_image,
                }
            )
        subtotal = to_money(subtotal)
        gst = to_money(subtotal * self._gst_rate)

        order = self._order_repo.create(
            {
                "user_id": dto.user_id,
                "user_name": dto.user_name,
                "user_email": dto.user_email,
                "items": items,
                "subtotal": subtotal,
                "gst": gst,
                "total": subtotal + gst,
                "payment_method": dto.payment_method or settings.DEFAULT_PAYMENT_METHOD,
                "idempotency_key": dto.idempotency_key,
            }
        )
        log = log.bind(order_id=str(order.id))

        # 4. Apply phase, stable lock order
        for (product_id, size), quantity in sorted(
            requested.items(), key=lambda entry: (str(entry[0][0]), entry[0][1])
        ):
            self._debit_with_retry(products[product_id], size, quantity)

        # 5. History + events (outbox rows share this transaction)
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                user_name=order.user_name,
                total=str(order.total),
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
            user_id=dto.user_id,
        )

        log.info("order.created", order_number=order.order_number, total=str(order.total))
        return self._order_repo.get_by_id(str(order.id)) or order, True

    @transaction.atomic
    def update_status(self, dto: UpdateOrderStatusDTO) -> Order:
        """Admin status write.

        Locks the order row before reading the previous status, so of two
        concurrent cancellations only the first one sees a non-cancelled
        order and credits stock.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: unknown status label.
        """
        order = self._order_repo.get_for_update(str(dto.order_id))
        if not order:
            raise OrderNotFound("Order not found")

        previous_status = order.status
        log = logger.bind(
            order_id=str(order.id),
            previous_status=previous_status,
            requested_status=dto.status,
        )

        new_status = OrderStatus.parse(dto.status)
        if new_status is None:
            log.warning("order.invalid_status")
            raise InvalidOrderStatus(f"Invalid order status: {dto.status}")

        restocked = False
        if (
            new_status == OrderStatus.CANCELLED
            and previous_status != OrderStatus.CANCELLED
        ):
            self._restock(order)
            restocked = True

        order.status = new_status
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                order_number=order.order_number,
                old_status=previous_status,
                new_status=new_status.value,
            )
        )
        if restocked:
            order.add_domain_event(
                OrderCancelled(
                    aggregate_id=order.id,
                    order_number=order.order_number,
                    user_name=order.user_name,
                    previous_status=previous_status,
                )
            )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=dto.notes,
            old_status=previous_status,
            user_id=dto.changed_by_id,
        )

        log.info("order.status_updated", new_status=new_status.value, restocked=restocked)
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound("Order not found")
        return order

    def list_orders(self, status: Optional[str] = None) -> List[Order]:
        """All orders newest-first, optionally restricted to one status.

        Raises:
            InvalidOrderStatus: unknown status label.
        """
        if not status:
            return self._order_repo.list()
        parsed = OrderStatus.parse(status)
        if parsed is None:
            raise InvalidOrderStatus(f"Invalid order status: {status}")
        return self._order_repo.list({"status": parsed})

    def list_user_orders(self, user_id) -> List[Order]:
        return self._order_repo.list_for_user(user_id)

    def pending_count(self) -> int:
        return self._order_repo.count_by_status(OrderStatus.PENDING)

    # ------------------------------------------------------------------
    # Ledger helpers
    # ------------------------------------------------------------------

    def _debit_with_retry(self, product: Product, size: str, quantity: int) -> None:
        """Debit once, then re-check and retry after each lost race.

        Raises:
            InsufficientStock: the re-check fails or retries run out.
        """
        for attempt in range(self._max_debit_retries + 1):
            try:
                self._ledger.debit(product.id, size, quantity)
                return
            except StockRaceLost:
                logger.warning(
                    "order.debit_race_lost",
                    product_id=str(product.id),
                    size=size,
                    attempt=attempt + 1,
                )
                if not self._ledger.check_availability(product.id, size, quantity).ok:
                    break
        raise InsufficientStock(f"{product.name} stock insufficient")

    def _restock(self, order: Order) -> None:
        """Credit back every line item, in product-id/size order."""
        items = sorted(
            order.items.all(),
            key=lambda item: (str(item.product_id or ""), item.selected_size),
        )
        for item in items:
            log = logger.bind(order_id=str(order.id), item=item.name, size=item.selected_size)
            if item.product_id is None:
                log.info("order.restock_skipped", reason="product_deleted")
                continue
            if not self._ledger.credit(item.product_id, item.selected_size, item.quantity):
                log.info("order.restock_skipped", reason="product_missing")
