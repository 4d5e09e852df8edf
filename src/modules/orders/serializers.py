"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Wire names are camelCase.

Checkout payloads may carry ``name``, ``price``, ``image``, ``subtotal``,
``gst`` and ``total``; they are accepted and ignored because the server
snapshot is authoritative.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.core.identity import display_name
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product = serializers.UUIDField()
    selectedSize = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField(min_value=1)
    name = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    image = serializers.CharField(required=False, allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = CreateOrderItemSerializer(many=True, required=False, allow_empty=True)
    paymentMethod = serializers.CharField(
        required=False, allow_blank=True, max_length=50
    )
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    gst = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line-item snapshot; ``product`` is ``null`` once the product is deleted."""

    product = serializers.UUIDField(source="product_id", read_only=True, allow_null=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )
    selectedSize = serializers.CharField(source="selected_size", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["product", "name", "price", "quantity", "selectedSize", "image"]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    oldStatus = serializers.CharField(source="old_status", read_only=True, allow_null=True)
    newStatus = serializers.CharField(source="new_status", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = OrderStatusHistory
        fields = ["id", "oldStatus", "newStatus", "notes", "createdAt"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with items; ``user`` resolved to ``{_id, name, email}``."""

    orderNumber = serializers.CharField(source="order_number", read_only=True)
    user = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    gst = serializers.DecimalField(
        max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "orderNumber",
            "user",
            "items",
            "subtotal",
            "gst",
            "total",
            "status",
            "paymentMethod",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_user(self, order: Order) -> dict:
        user = order.user
        if user is None:
            return {"_id": None, "name": order.user_name, "email": order.user_email}
        return {
            "_id": str(user.pk),
            "name": display_name(user) or order.user_name,
            "email": user.email or order.user_email,
        }


class OrderDetailSerializer(OrderSerializer):
    statusHistory = StatusHistorySerializer(
        source="status_history", many=True, read_only=True
    )

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["statusHistory"]
        read_only_fields = fields
