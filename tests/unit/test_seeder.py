"""Tests for the test data seeder."""

from unittest.mock import Mock

import pytest
import requests

from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.models.product import NewProduct
from api_qa_harness.seeder import TestDataSeeder
from api_qa_harness.testing import payloads
from api_qa_harness.testing.responses import response


@pytest.fixture
def product_client() -> Mock:
    """Create mock product client."""
    return Mock(spec=ProductClient)


@pytest.fixture
def user_client() -> Mock:
    """Create mock user client."""
    return Mock(spec=UserClient)


@pytest.fixture
def seeder(product_client: Mock, user_client: Mock) -> TestDataSeeder:
    """Create seeder with mock clients."""
    return TestDataSeeder(product_client=product_client, user_client=user_client)


def test_seed_products_keeps_created(
    seeder: TestDataSeeder, product_client: Mock
) -> None:
    """Products answered with 200 or 201 are remembered."""
    product_client.create_product.side_effect = [
        response(201, json_body=payloads.product(product_id=11)),
        response(200, json_body=payloads.product(product_id=12)),
    ]

    created = seeder.seed_products(2)

    assert [p.id for p in created] == [11, 12]
    assert seeder.created_product_ids == [11, 12]
    assert seeder.products_count == 2


def test_seed_products_skips_refused(
    seeder: TestDataSeeder, product_client: Mock
) -> None:
    """Refused or unreadable records are left out without raising."""
    product_client.create_product.side_effect = [
        response(403, text="forbidden"),
        response(201, text="not json"),
        response(201, json_body=payloads.product(product_id=13)),
    ]

    seeder.seed_products(3)

    assert seeder.created_product_ids == [13]


def test_seed_products_sends_generated_products(
    seeder: TestDataSeeder, product_client: Mock
) -> None:
    product_client.create_product.return_value = response(
        201, json_body=payloads.product()
    )

    seeder.seed_products(3)

    sent = [c.args[0] for c in product_client.create_product.call_args_list]
    assert len(sent) == 3
    for product in sent:
        assert isinstance(product, NewProduct)
        assert 10 <= product.price <= 1000


def test_seed_users(seeder: TestDataSeeder, user_client: Mock) -> None:
    user_client.create_user.side_effect = [
        response(201, json_body=payloads.user(user_id=1)),
        response(500, text="boom"),
    ]

    seeder.seed_users(2)

    assert seeder.created_user_ids == [1]


def test_seed_all_defaults(
    seeder: TestDataSeeder, product_client: Mock, user_client: Mock
) -> None:
    """Five users and ten products by default."""
    product_client.create_product.return_value = response(
        201, json_body=payloads.product()
    )
    user_client.create_user.return_value = response(201, json_body=payloads.user())

    seeder.seed_all()

    assert user_client.create_user.call_count == 5
    assert product_client.create_product.call_count == 10
    assert len(seeder.created_users) == 5


def test_clear_forgets_records(seeder: TestDataSeeder, product_client: Mock) -> None:
    product_client.create_product.return_value = response(
        201, json_body=payloads.product()
    )
    seeder.seed_products(2)

    seeder.clear()

    assert seeder.created_products == []
    assert seeder.products_count == 0


def test_created_lists_are_copies(seeder: TestDataSeeder, product_client: Mock) -> None:
    product_client.create_product.return_value = response(
        201, json_body=payloads.product()
    )
    seeder.seed_products(1)

    snapshot = seeder.created_products
    seeder.clear()

    assert len(snapshot) == 1


def test_transport_error_keeps_earlier_products(
    seeder: TestDataSeeder, product_client: Mock
) -> None:
    """Products created before a connection failure stay remembered."""
    product_client.create_product.side_effect = [
        response(201, json_body=payloads.product(product_id=1)),
        response(201, json_body=payloads.product(product_id=2)),
        requests.ConnectionError("reset"),
        response(201, json_body=payloads.product(product_id=4)),
    ]

    created = seeder.seed_products(4)

    assert [p.id for p in created] == [1, 2, 4]
    assert seeder.created_product_ids == [1, 2, 4]


def test_transport_error_keeps_earlier_users(
    seeder: TestDataSeeder, user_client: Mock
) -> None:
    user_client.create_user.side_effect = [
        response(201, json_body=payloads.user(user_id=1)),
        response(201, json_body=payloads.user(user_id=2)),
        requests.Timeout("slow"),
    ]

    seeder.seed_users(3)

    assert seeder.created_user_ids == [1, 2]


def test_interrupt_keeps_products_created_so_far(
    seeder: TestDataSeeder, product_client: Mock
) -> None:
    """Records are remembered one by one, not at the end of the loop."""
    product_client.create_product.side_effect = [
        response(201, json_body=payloads.product(product_id=1)),
        KeyboardInterrupt,
    ]

    with pytest.raises(KeyboardInterrupt):
        seeder.seed_products(2)

    assert seeder.created_product_ids == [1]
