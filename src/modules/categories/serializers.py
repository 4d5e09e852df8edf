"""Category DRF serializers for API input/output.

Field names on the wire are camelCase (``isFeatured``, ``subCategories``)
to match the storefront frontend; the service layer receives snake_case
Pydantic DTOs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.categories.models import Category


class NullableUUIDField(serializers.UUIDField):
    """UUID field that treats ``""`` as ``None`` (move to root)."""

    def to_internal_value(self, data):
        if data == "":
            return None
        return super().to_internal_value(data)


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.CharField(required=False, allow_blank=True, max_length=500)
    bannerImage = serializers.CharField(
        source="banner_image", required=False, allow_blank=True, max_length=500
    )
    metaTitle = serializers.CharField(
        source="meta_title", required=False, allow_blank=True, max_length=255
    )
    metaDescription = serializers.CharField(
        source="meta_description", required=False, allow_blank=True
    )
    isFeatured = serializers.BooleanField(source="is_featured", required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)
    parent = NullableUUIDField(source="parent_id", required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class CategorySerializer(serializers.ModelSerializer):
    parent = serializers.UUIDField(source="parent_id", read_only=True, allow_null=True)
    bannerImage = serializers.CharField(source="banner_image", read_only=True)
    metaTitle = serializers.CharField(source="meta_title", read_only=True)
    metaDescription = serializers.CharField(source="meta_description", read_only=True)
    isFeatured = serializers.BooleanField(source="is_featured", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "parent",
            "description",
            "image",
            "bannerImage",
            "metaTitle",
            "metaDescription",
            "isFeatured",
            "isActive",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
