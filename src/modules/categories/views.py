"""Category API views.

Exposes ``CategoryService`` via HTTP.  Reads are public; writes are
admin-only.  Domain exceptions are translated into HTTP status codes
here; anything unexpected reaches the project exception handler.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
from modules.categories.exceptions import (
    CategoryNotFound,
    DepthExceeded,
    DuplicateCategory,
    SelfParent,
)
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.serializers import CategorySerializer, CategoryWriteSerializer
from modules.categories.services import CategoryService
from modules.core.exceptions import pydantic_message
from modules.products.repositories.django_repository import ProductDjangoRepository


class CategoryViewSet(GenericViewSet):
    """ViewSet for the category tree.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(
            category_repository=CategoryDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]
        return [IsAdminUser()]

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/categories: roots annotated with ``subCategories``."""
        tree = [
            {
                **CategorySerializer(node["category"]).data,
                "subCategories": CategorySerializer(
                    node["sub_categories"], many=True
                ).data,
            }
            for node in self._service.category_tree()
        ]
        return Response(tree)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            category = self._service.get_category(pk)
        except CategoryNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(CategorySerializer(category).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/categories"""
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateCategoryDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"message": pydantic_message(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            category = self._service.create_category(dto)
        except CategoryNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except (DepthExceeded, DuplicateCategory) as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(
            CategorySerializer(category).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/categories/{pk}; fields not sent are left untouched."""
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateCategoryDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"message": pydantic_message(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            category = self._service.update_category(pk, dto)
        except CategoryNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except (SelfParent, DepthExceeded, DuplicateCategory) as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(CategorySerializer(category).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/categories/{pk}: cascades to children and products."""
        try:
            summary = self._service.delete_category(pk)
        except CategoryNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return Response(
            {
                "message": "Entity and all associated dependencies successfully purged.",
                "categoriesDeleted": summary.categories_deleted,
                "productsDeleted": summary.products_deleted,
            }
        )
