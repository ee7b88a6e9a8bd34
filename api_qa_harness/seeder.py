"""Seeding of the API with generated users and products."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import requests
from polyfactory.factories.pydantic_factory import ModelFactory

from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.models.product import NewProduct, Product
from api_qa_harness.models.user import NewUser, User
from api_qa_harness.testing.factories import NewProductFactory, NewUserFactory

log = logging.getLogger(__name__)

CREATED_CODES = frozenset({200, 201})


@dataclass(kw_only=True)
class TestDataSeeder:
    """Creates fixture records through the API and remembers what it created.

    Records that the server refuses are logged and left out; seeding never
    raises on a refused record. Forgetting the records with :meth:`clear`
    does not delete them from the server.
    """

    __test__ = False

    product_client: ProductClient
    user_client: UserClient
    product_factory: type[ModelFactory[NewProduct]] = NewProductFactory
    user_factory: type[ModelFactory[NewUser]] = NewUserFactory

    _products: list[Product] = field(default_factory=list, init=False)
    _users: list[User] = field(default_factory=list, init=False)

    @property
    def created_products(self) -> Sequence[Product]:
        return list(self._products)

    @property
    def created_users(self) -> Sequence[User]:
        return list(self._users)

    @property
    def created_product_ids(self) -> Sequence[int]:
        return [product.id for product in self._products]

    @property
    def created_user_ids(self) -> Sequence[int]:
        return [user.id for user in self._users]

    @property
    def products_count(self) -> int:
        return len(self._products)

    def generate_product(self) -> NewProduct:
        """Build a product without sending it."""
        return self.product_factory.build()

    def generate_user(self) -> NewUser:
        """Build a user without sending it."""
        return self.user_factory.build()

    def seed_all(self, users: int = 5, products: int = 10) -> None:
        log.info("Seeding %d user(s) and %d product(s)", users, products)
        self.seed_users(users)
        self.seed_products(products)

    def seed_users(self, count: int) -> Sequence[User]:
        """Create ``count`` users and return those the server accepted.

        Each accepted user is remembered as soon as it is created, so a
        transport error on a later user does not lose it.
        """
        log.info("Creating %d user(s)", count)
        created: list[User] = []
        for _ in range(count):
            user = self.generate_user()
            try:
                response = self.user_client.create_user(user)
            except requests.RequestException as e:
                log.error("Failed to create user %s: %s", user.email, e)
                continue
            if response.status_code not in CREATED_CODES:
                log.error(
                    "Failed to create user %s: status %d, body: %s",
                    user.email,
                    response.status_code,
                    response.text,
                )
                continue
            try:
                accepted = User.model_validate(response.json())
            except ValueError as e:
                log.error(
                    "Server returned an unreadable user for %s: %s", user.email, e
                )
                continue
            created.append(accepted)
            self._users.append(accepted)
            log.info("Created user %s (status %d)", user.email, response.status_code)

        if not created:
            log.warning("No users were created")
        return created

    def seed_products(self, count: int) -> Sequence[Product]:
        """Create ``count`` products and return those the server accepted."""
        log.info("Creating %d product(s)", count)
        created: list[Product] = []
        for _ in range(count):
            product = self.generate_product()
            try:
                response = self.product_client.create_product(product)
            except requests.RequestException as e:
                log.error("Failed to create product %s: %s", product.name, e)
                continue
            if response.status_code not in CREATED_CODES:
                log.error(
                    "Failed to create product %s: status %d, body: %s",
                    product.name,
                    response.status_code,
                    response.text,
                )
                continue
            try:
                accepted = Product.model_validate(response.json())
            except ValueError as e:
                log.error(
                    "Server returned an unreadable product for %s: %s", product.name, e
                )
                continue
            created.append(accepted)
            self._products.append(accepted)
            log.info(
                "Created product %s (status %d)", product.name, response.status_code
            )

        if not created:
            log.warning("No products were created")
        return created

    def clear(self) -> None:
        """Forget the created records."""
        self._products.clear()
        self._users.clear()
        log.info("Cleared seeded records from memory")
