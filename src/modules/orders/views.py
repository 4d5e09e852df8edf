"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.identity import display_name, is_admin
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    UpdateOrderStatusDTO,
)
from modules.orders.exceptions import (
    EmptyCart,
    IdempotencyKeyReused,
    InsufficientStock,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderDetailSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.ledger import StockLedger
from modules.products.repositories.django_repository import ProductDjangoRepository

_ADMIN_ACTIONS = {"list", "pending_count", "set_status"}


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        product_repository = ProductDjangoRepository()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=product_repository,
            ledger=StockLedger(product_repository),
        )

    def get_permissions(self):
        if self.action in _ADMIN_ACTIONS:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttle scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "myorders"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)
        data = create_serializer.validated_data

        user = request.user
        dto = CreateOrderDTO(
            user_id=user.pk,
            user_name=display_name(user),
            user_email=user.email or "",
            items=[
                CreateOrderItemDTO(
                    product_id=item["product"],
                    selected_size=item["selectedSize"],
                    quantity=item["quantity"],
                )
                for item in data.get("items", [])
            ],
            payment_method=data.get("paymentMethod") or None,
            idempotency_key=request.headers.get("Idempotency-Key") or None,
        )

        try:
            order, created = self._service.create_order(dto)
        except (EmptyCart, InsufficientStock) as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except ProductNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except IdempotencyKeyReused as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(
            OrderSerializer(order).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/orders (admin): newest first, optional ``?status=``."""
        try:
            orders = self._service.list_orders(request.query_params.get("status"))
        except InvalidOrderStatus as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(orders, many=True).data)

    @action(detail=False, methods=["get"])
    def myorders(self, request: Request) -> Response:
        """GET /api/orders/myorders"""
        orders = self._service.list_user_orders(request.user.pk)
        return Response(OrderSerializer(orders, many=True).data)

    @action(detail=False, methods=["get"], url_path="pending/count")
    def pending_count(self, request: Request) -> Response:
        """GET /api/orders/pending/count (admin)"""
        return Response({"count": self._service.pending_count()})

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/orders/{pk}: owner or admin."""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        if order.user_id != request.user.pk and not is_admin(request.user):
            return Response(
                {"message": "Not authorized to view this order"},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(OrderDetailSerializer(order).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/orders/{pk}/status (admin)

        Cancelling a Pending or Completed order restores its stock.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateOrderStatusDTO(
                order_id=pk,
                status=serializer.validated_data["status"],
                notes=serializer.validated_data["notes"],
                changed_by_id=request.user.pk,
            )
        except PydanticValidationError:
            return Response(
                {"message": "Invalid order ID format"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.update_status(dto)
        except OrderNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)
