from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.categories.dtos import CreateCategoryDTO
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderStatusDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import CreateProductDTO, SizeVariantDTO
from modules.products.ledger import StockLedger
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATEGORY_TREE = {
    "Men": ["T-Shirts", "Jeans", "Jackets"],
    "Women": ["Dresses", "Tops", "Skirts"],
    "Accessories": ["Caps", "Bags"],
}

APPAREL_SIZES = ["S", "M", "L", "XL"]


class Command(BaseCommand):
    help = "Seed database with a development catalog and sample orders."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        product_repository = ProductDjangoRepository()
        category_repository = CategoryDjangoRepository()
        ledger = StockLedger(product_repository)
        self._categories = CategoryService(category_repository, product_repository)
        self._products = ProductService(product_repository, category_repository, ledger)
        self._orders = OrderService(OrderDjangoRepository(), product_repository, ledger)

        users = self._seed_users()
        leaves = self._seed_categories()
        products = self._seed_products(leaves)
        orders_created = self._seed_orders(users, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"categories={Category.objects.count()}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> list:
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser(
                "admin", email="admin@example.com", password="admin123"
            )
        shoppers = []
        for username, first, last in [
            ("asha", "Asha", "Verma"),
            ("rohan", "Rohan", "Mehta"),
            ("meera", "Meera", "Iyer"),
        ]:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username,
                    email=f"{username}@example.com",
                    password=f"{username}123",
                    first_name=first,
                    last_name=last,
                )
            shoppers.append(user)
        return shoppers

    def _seed_categories(self) -> list[Category]:
        self.stdout.write("Creating categories...")
        leaves: list[Category] = []
        for root_name, children in CATEGORY_TREE.items():
            root = Category.objects.filter(name=root_name, parent__isnull=True).first()
            if root is None:
                root = self._categories.create_category(
                    CreateCategoryDTO(name=root_name, is_featured=True)
                )
            for child_name in children:
                child = Category.objects.filter(name=child_name, parent=root).first()
                if child is None:
                    child = self._categories.create_category(
                        CreateCategoryDTO(name=child_name, parent_id=root.id)
                    )
                leaves.append(child)
        self.stdout.write(self.style.SUCCESS("Creating categories... Done!"))
        return leaves

    def _seed_products(self, leaves: list[Category]) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for category in leaves:
            for n in range(1, 4):
                name = f"{category.name} Style {n}"
                product = Product.objects.filter(name=name, category=category).first()
                if product is None:
                    product = self._products.create_product(
                        CreateProductDTO(
                            name=name,
                            price=Decimal(random.randrange(29900, 499900, 100)) / 100,
                            category_id=category.id,
                            description=f"{category.name} from the seed catalog.",
                            images=[f"https://picsum.photos/seed/{category.slug}-{n}/600/800"],
                            sizes=[
                                SizeVariantDTO(size=size, quantity=random.randint(0, 25))
                                for size in APPAREL_SIZES
                            ],
                            is_featured=n == 1,
                        )
                    )
                products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, users: list, products: list[Product]) -> int:
        self.stdout.write("Creating orders...")
        orders_created = 0
        for i in range(20):
            key = f"seed-order-{i + 1}"
            # Seeded per key: the same buyer and lines on every run
            rng = random.Random(key)
            user = rng.choice(users)
            picked = rng.sample(products, k=rng.randint(1, 3))
            dto = CreateOrderDTO(
                user_id=user.pk,
                user_name=user.get_full_name() or user.username,
                user_email=user.email,
                items=[
                    CreateOrderItemDTO(
                        product_id=product.id,
                        selected_size=rng.choice(APPAREL_SIZES),
                        quantity=rng.randint(1, 2),
                    )
                    for product in picked
                ],
                idempotency_key=key,
            )
            try:
                order, created = self._orders.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped seed order {i + 1}: {exc}"))
                continue
            if not created:
                continue
            orders_created += 1

            roll = rng.random()
            if roll < 0.3:
                new_status = OrderStatus.COMPLETED
            elif roll < 0.45:
                new_status = OrderStatus.CANCELLED
            else:
                continue
            self._orders.update_status(
                UpdateOrderStatusDTO(
                    order_id=order.id, status=new_status, notes="Seed status"
                )
            )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
