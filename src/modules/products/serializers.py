"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Wire names are camelCase; ``image`` is
the list of image URLs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product, ProductSize


class SizeVariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductSize
        fields = ["size", "quantity"]


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class SizeVariantInputSerializer(serializers.Serializer):
    size = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField(min_value=0)


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    category = serializers.UUIDField(source="category_id")
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.ListField(
        source="images", child=serializers.CharField(max_length=500)
    )
    sizes = SizeVariantInputSerializer(many=True, required=False)
    isFeatured = serializers.BooleanField(source="is_featured", required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class ProductSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )
    category = serializers.UUIDField(source="category_id", read_only=True)
    categoryName = serializers.CharField(source="category.name", read_only=True)
    image = serializers.ListField(source="images", read_only=True)
    sizes = SizeVariantSerializer(many=True, read_only=True)
    isFeatured = serializers.BooleanField(source="is_featured", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "categoryName",
            "image",
            "sizes",
            "isFeatured",
            "isActive",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
