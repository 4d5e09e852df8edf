"""HTTP tests for /api/products."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.categories.models import Category
from modules.products.models import Product, ProductSize

pytestmark = pytest.mark.integration

URL = "/api/products"


@pytest.fixture()
def product_payload(sub_category):
    return {
        "name": "Linen Shirt",
        "price": "1499.00",
        "category": str(sub_category.id),
        "description": "Breathable summer shirt",
        "image": ["https://cdn.example.com/linen-1.jpg"],
        "sizes": [{"size": "s", "quantity": 4}, {"size": "M", "quantity": 0}],
        "isFeatured": True,
    }


class TestProductReads:
    def test_list_is_public(self, api_client, make_product):
        make_product("Tee", sizes={"M": 3, "L": 1})

        response = api_client.get(URL)

        assert response.status_code == 200
        [tee] = response.json()
        assert tee["name"] == "Tee"
        assert tee["price"] == 500.0
        assert tee["categoryName"] == "T-Shirts"
        assert tee["sizes"] == [{"size": "M", "quantity": 3}, {"size": "L", "quantity": 1}]

    def test_filter_by_root_category_includes_children(
        self, api_client, make_product, root_category
    ):
        make_product("Tee")
        other_root = Category.objects.create(name="Women", slug="women")
        make_product("Saree", category=other_root)

        response = api_client.get(URL, {"category": str(root_category.id)})

        assert [p["name"] for p in response.json()] == ["Tee"]

    def test_filter_by_price_and_name(self, api_client, make_product):
        make_product("Basic Tee", price=Decimal("299.00"))
        make_product("Premium Tee", price=Decimal("1999.00"))
        make_product("Hoodie", price=Decimal("1500.00"))

        response = api_client.get(URL, {"name": "tee", "min_price": "1000"})

        assert [p["name"] for p in response.json()] == ["Premium Tee"]

    def test_retrieve(self, api_client, make_product):
        tee = make_product("Tee")
        response = api_client.get(f"{URL}/{tee.id}")
        assert response.status_code == 200
        assert response.json()["id"] == str(tee.id)

    def test_retrieve_unknown(self, api_client):
        response = api_client.get(f"{URL}/0190f7a1-0000-7000-8000-000000000000")
        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}


class TestProductWrites:
    def test_create(self, admin_api_client, product_payload):
        response = admin_api_client.post(URL, product_payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["sizes"] == [{"size": "S", "quantity": 4}, {"size": "M", "quantity": 0}]
        assert body["isFeatured"] is True
        assert body["image"] == ["https://cdn.example.com/linen-1.jpg"]

    def test_create_requires_admin(self, shopper_client, product_payload):
        response = shopper_client.post(URL, product_payload, format="json")
        assert response.status_code == 403
        assert not Product.objects.exists()

    def test_create_without_image(self, admin_api_client, product_payload):
        product_payload["image"] = []
        response = admin_api_client.post(URL, product_payload, format="json")
        assert response.status_code == 400
        assert response.json()["message"] == "At least one image is required"

    def test_create_with_unknown_category(self, admin_api_client, product_payload):
        product_payload["category"] = "0190f7a1-0000-7000-8000-000000000000"
        response = admin_api_client.post(URL, product_payload, format="json")
        assert response.status_code == 400
        assert response.json()["message"] == "The selected category does not exist"

    def test_create_with_duplicate_sizes(self, admin_api_client, product_payload):
        product_payload["sizes"] = [{"size": "m", "quantity": 1}, {"size": "M", "quantity": 2}]
        response = admin_api_client.post(URL, product_payload, format="json")
        assert response.status_code == 400
        assert not Product.objects.exists()

    def test_negative_price_rejected(self, admin_api_client, product_payload):
        product_payload["price"] = "-1.00"
        response = admin_api_client.post(URL, product_payload, format="json")
        assert response.status_code == 400
        assert "message" in response.json()

    def test_update_replaces_sizes(self, admin_api_client, make_product):
        tee = make_product("Tee", sizes={"M": 3})

        response = admin_api_client.patch(
            f"{URL}/{tee.id}",
            {"price": "550.00", "sizes": [{"size": "XL", "quantity": 7}]},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["price"] == 550.0
        assert list(ProductSize.objects.filter(product=tee).values_list("size", "quantity")) == [
            ("XL", 7)
        ]

    def test_delete(self, admin_api_client, make_product):
        tee = make_product("Tee")
        response = admin_api_client.delete(f"{URL}/{tee.id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Product removed"}
        assert not Product.objects.exists()

    def test_delete_unknown(self, admin_api_client):
        response = admin_api_client.delete(f"{URL}/0190f7a1-0000-7000-8000-000000000000")
        assert response.status_code == 404
