from decimal import Decimal

import pytest
from django.utils.text import slugify
from rest_framework.test import APIClient

from modules.categories.models import Category
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.ledger import StockLedger
from modules.products.models import Product, ProductSize
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def shopper(django_user_model):
    return django_user_model.objects.create_user(
        username="asha",
        email="asha@example.com",
        password="pass12345",
        first_name="Asha",
        last_name="Verma",
    )


@pytest.fixture()
def other_shopper(django_user_model):
    return django_user_model.objects.create_user(
        username="rohan", email="rohan@example.com", password="pass12345"
    )


@pytest.fixture()
def shopper_client(shopper):
    client = APIClient()
    client.force_authenticate(user=shopper)
    return client


@pytest.fixture()
def admin_api_client(admin_user):
    """``admin_user`` is pytest-django's staff superuser."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def root_category():
    return Category.objects.create(name="Men", slug="men")


@pytest.fixture()
def sub_category(root_category):
    return Category.objects.create(name="T-Shirts", slug="t-shirts", parent=root_category)


@pytest.fixture()
def make_product(sub_category):
    """Factory: ``make_product("Tee", sizes={"M": 3})``."""

    def _make(name="Tee", price=Decimal("500.00"), sizes=None, category=None, images=None):
        product = Product.objects.create(
            name=name,
            price=price,
            category=category or sub_category,
            images=images or [f"https://cdn.example.com/{slugify(name)}.jpg"],
        )
        for position, (size, quantity) in enumerate((sizes or {"M": 3}).items()):
            ProductSize.objects.create(
                product=product, size=size, quantity=quantity, position=position
            )
        return product

    return _make


@pytest.fixture()
def stock_of():
    """Current quantity of a size variant, ``None`` if the variant is gone."""

    def _stock(product, size):
        return (
            ProductSize.objects.filter(product=product, size=size)
            .values_list("quantity", flat=True)
            .first()
        )

    return _stock


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def ledger():
    return StockLedger(ProductDjangoRepository())


@pytest.fixture()
def order_service(ledger):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        ledger=ledger,
    )
