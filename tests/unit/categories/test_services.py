"""Unit tests for the category hierarchy guard.

Covers:
- Two-level depth limit on create and on re-parent.
- Self-parenting rejected.
- Case-insensitive duplicate names per parent scope.
- Slug generation with numeric suffixes.
- Cascading delete completeness and order snapshot survival.
- Tree listing of active categories.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
from modules.categories.exceptions import (
    CategoryNotFound,
    DepthExceeded,
    DuplicateCategory,
    SelfParent,
)
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.orders.models import Order, OrderItem
from modules.products.models import Product, ProductSize
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CategoryService(
        category_repository=CategoryDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class TestCreateCategory:
    def test_create_root(self, service):
        category = service.create_category(CreateCategoryDTO(name="  Women  "))
        assert category.name == "Women"
        assert category.slug == "women"
        assert category.is_root

    def test_create_sub_category(self, service, root_category):
        child = service.create_category(
            CreateCategoryDTO(name="Jeans", parent_id=root_category.id)
        )
        assert child.parent_id == root_category.id

    def test_nesting_under_sub_category_exceeds_depth(self, service, sub_category):
        with pytest.raises(DepthExceeded):
            service.create_category(
                CreateCategoryDTO(name="Graphic Tees", parent_id=sub_category.id)
            )
        assert not Category.objects.filter(name="Graphic Tees").exists()

    def test_unknown_parent(self, service):
        with pytest.raises(CategoryNotFound, match="Parent category not found"):
            service.create_category(CreateCategoryDTO(name="Orphan", parent_id=uuid4()))

    def test_duplicate_name_in_same_scope(self, service, root_category):
        service.create_category(CreateCategoryDTO(name="Jeans", parent_id=root_category.id))
        with pytest.raises(DuplicateCategory):
            service.create_category(
                CreateCategoryDTO(name="JEANS", parent_id=root_category.id)
            )

    def test_duplicate_root_name(self, service, root_category):
        with pytest.raises(DuplicateCategory):
            service.create_category(CreateCategoryDTO(name="men"))

    def test_same_name_under_other_parent_gets_suffixed_slug(self, service, sub_category):
        women = service.create_category(CreateCategoryDTO(name="Women"))
        tees = service.create_category(
            CreateCategoryDTO(name="T-Shirts", parent_id=women.id)
        )
        assert tees.slug == "t-shirts-2"


class TestUpdateCategory:
    def test_self_parent_rejected(self, service, root_category):
        with pytest.raises(SelfParent):
            service.update_category(
                str(root_category.id), UpdateCategoryDTO(parent_id=root_category.id)
            )

    def test_reparenting_category_with_children_exceeds_depth(
        self, service, root_category, sub_category
    ):
        women = Category.objects.create(name="Women", slug="women")
        with pytest.raises(DepthExceeded):
            service.update_category(
                str(root_category.id), UpdateCategoryDTO(parent_id=women.id)
            )

    def test_move_to_root_with_explicit_null(self, service, sub_category):
        moved = service.update_category(
            str(sub_category.id), UpdateCategoryDTO(parent_id=None)
        )
        assert moved.parent_id is None

    def test_omitted_parent_is_kept(self, service, sub_category, root_category):
        updated = service.update_category(
            str(sub_category.id), UpdateCategoryDTO(description="Cotton tees")
        )
        assert updated.parent_id == root_category.id
        assert updated.description == "Cotton tees"

    def test_rename_regenerates_slug(self, service, sub_category):
        updated = service.update_category(str(sub_category.id), UpdateCategoryDTO(name="Polos"))
        assert updated.slug == "polos"

    def test_rename_to_sibling_name_rejected(self, service, root_category, sub_category):
        Category.objects.create(name="Jeans", slug="jeans", parent=root_category)
        with pytest.raises(DuplicateCategory):
            service.update_category(str(sub_category.id), UpdateCategoryDTO(name="jeans"))

    def test_unknown_category(self, service):
        with pytest.raises(CategoryNotFound):
            service.update_category(str(uuid4()), UpdateCategoryDTO(name="Ghost"))


class TestDeleteCategory:
    def test_cascade_removes_children_and_all_products(self, service, root_category, make_product):
        c1 = Category.objects.create(name="C1", slug="c1", parent=root_category)
        c2 = Category.objects.create(name="C2", slug="c2", parent=root_category)
        make_product("P1", category=c1)
        make_product("P2", category=c2)
        make_product("P3", category=root_category)

        summary = service.delete_category(str(root_category.id))

        # C1, C2, the T-Shirts fixture child and the root itself
        assert summary.categories_deleted == 4
        assert summary.products_deleted == 3
        assert not Category.objects.filter(slug="t-shirts").exists()
        assert Category.objects.count() == 0
        assert Product.objects.count() == 0
        assert ProductSize.objects.count() == 0

    def test_deleting_sub_category_keeps_parent(self, service, root_category, sub_category, make_product):
        make_product("Tee", category=sub_category)
        summary = service.delete_category(str(sub_category.id))
        assert summary.categories_deleted == 1
        assert summary.products_deleted == 1
        assert Category.objects.filter(id=root_category.id).exists()

    def test_order_snapshots_survive(self, service, root_category, sub_category, make_product, shopper):
        product = make_product("Tee", category=sub_category)
        order = Order.objects.create(user=shopper, subtotal=Decimal("500.00"))
        OrderItem.objects.create(
            order=order,
            product=product,
            name="Tee",
            price=Decimal("500.00"),
            quantity=1,
            selected_size="M",
        )

        service.delete_category(str(root_category.id))

        item = OrderItem.objects.get(order=order)
        assert item.product_id is None
        assert item.name == "Tee"
        assert item.price == Decimal("500.00")

    def test_rerun_after_delete_reports_not_found(self, service, root_category):
        service.delete_category(str(root_category.id))
        with pytest.raises(CategoryNotFound):
            service.delete_category(str(root_category.id))


class TestCategoryTree:
    def test_roots_with_active_children_sorted_by_name(self, service, root_category, sub_category):
        Category.objects.create(name="Jackets", slug="jackets", parent=root_category)
        Category.objects.create(name="Hidden", slug="hidden", parent=root_category, is_active=False)
        Category.objects.create(name="Accessories", slug="accessories")

        tree = service.category_tree()

        assert [node["category"].name for node in tree] == ["Accessories", "Men"]
        men = tree[1]
        assert [c.name for c in men["sub_categories"]] == ["Jackets", "T-Shirts"]
