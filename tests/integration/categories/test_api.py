"""HTTP tests for /api/categories."""

from __future__ import annotations

import pytest

from modules.categories.models import Category
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/categories"


class TestCategoryTreeEndpoint:
    def test_tree_is_public(self, api_client, sub_category):
        Category.objects.create(name="Polos", slug="polos", parent=sub_category.parent)
        Category.objects.create(name="Hidden", slug="hidden", is_active=False)

        response = api_client.get(URL)

        assert response.status_code == 200
        [men] = response.json()
        assert men["name"] == "Men"
        assert men["parent"] is None
        assert [c["name"] for c in men["subCategories"]] == ["Polos", "T-Shirts"]

    def test_trailing_slash_is_optional(self, api_client, root_category):
        assert api_client.get(f"{URL}/").status_code == 200

    def test_retrieve_unknown(self, api_client):
        response = api_client.get(f"{URL}/0190f7a1-0000-7000-8000-000000000000")
        assert response.status_code == 404
        assert response.json() == {"message": "Category not found"}


class TestCategoryWrites:
    def test_create_requires_admin(self, shopper_client):
        response = shopper_client.post(URL, {"name": "Kids"}, format="json")
        assert response.status_code == 403

    def test_create_requires_authentication(self, api_client):
        response = api_client.post(URL, {"name": "Kids"}, format="json")
        assert response.status_code == 401

    def test_create_sub_category(self, admin_api_client, root_category):
        response = admin_api_client.post(
            URL, {"name": "Jeans", "parent": str(root_category.id)}, format="json"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "jeans"
        assert body["parent"] == str(root_category.id)

    def test_third_level_is_conflict(self, admin_api_client, sub_category):
        response = admin_api_client.post(
            URL, {"name": "V-Neck", "parent": str(sub_category.id)}, format="json"
        )
        assert response.status_code == 409
        assert "2-level" in response.json()["message"]

    def test_duplicate_name_is_conflict(self, admin_api_client, sub_category):
        response = admin_api_client.post(
            URL,
            {"name": "t-shirts", "parent": str(sub_category.parent_id)},
            format="json",
        )
        assert response.status_code == 409

    def test_missing_parent_is_not_found(self, admin_api_client):
        response = admin_api_client.post(
            URL,
            {"name": "Orphan", "parent": "0190f7a1-0000-7000-8000-000000000000"},
            format="json",
        )
        assert response.status_code == 404

    def test_self_parent_is_conflict(self, admin_api_client, root_category):
        response = admin_api_client.put(
            f"{URL}/{root_category.id}", {"parent": str(root_category.id)}, format="json"
        )
        assert response.status_code == 409

    def test_empty_parent_moves_to_root(self, admin_api_client, sub_category):
        response = admin_api_client.patch(
            f"{URL}/{sub_category.id}", {"parent": ""}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["parent"] is None

    def test_delete_purges_tree(
        self, admin_api_client, root_category, make_product, order_service, shopper
    ):
        tee = make_product("Tee", sizes={"M": 2})
        order_service.create_order(
            CreateOrderDTO(
                user_id=shopper.pk,
                items=[CreateOrderItemDTO(product_id=tee.id, selected_size="M", quantity=1)],
            )
        )

        response = admin_api_client.delete(f"{URL}/{root_category.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["categoriesDeleted"] == 2
        assert body["productsDeleted"] == 1
        assert not Category.objects.exists()
        assert not Product.objects.exists()
        item = OrderItem.objects.get()
        assert item.product_id is None
        assert item.name == "Tee"

    def test_delete_unknown(self, admin_api_client):
        response = admin_api_client.delete(f"{URL}/0190f7a1-0000-7000-8000-000000000000")
        assert response.status_code == 404
