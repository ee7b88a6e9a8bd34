"""Tests for the cleanup services."""

from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from api_qa_harness.cleanup import (
    DISCOUNTED_PRICE,
    ProductCleanupService,
    UserCleanupService,
)
from api_qa_harness.clients.base import ApiError
from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.clock import FixedClock
from api_qa_harness.error_log import ErrorLog
from api_qa_harness.models.product import NewProduct
from api_qa_harness.models.result import CleanupReport
from api_qa_harness.testing import payloads
from api_qa_harness.testing.factories import UserFactory
from api_qa_harness.testing.responses import response


@pytest.fixture
def error_log(tmp_path: Path) -> ErrorLog:
    """Create error log in a temporary directory."""
    return ErrorLog(
        path=tmp_path / "errors.log", clock=FixedClock(at=datetime(2023, 1, 3, 10, 0))
    )


@pytest.fixture
def product_client() -> Mock:
    """Create mock product client."""
    return Mock(spec=ProductClient)


@pytest.fixture
def service(product_client: Mock, error_log: ErrorLog) -> ProductCleanupService:
    """Create product cleanup service that does not wait between attempts."""
    return ProductCleanupService(client=product_client, error_log=error_log, delay=0)


def page(
    *products: dict[str, object], total_pages: int | None = 1
) -> requests.Response:
    return response(
        200, json_body=payloads.product_page(content=products, total_pages=total_pages)
    )


class TestProductCleanup:
    """Tests for ProductCleanupService."""

    def test_deletes_cheap_products(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(
                payloads.product(product_id=1, price=10.0),
                payloads.product(product_id=2, price=20.0),
            ),
            page(),
        ]
        product_client.delete_product.return_value = response(204)

        report = service.clean_up_all_products()

        assert report == CleanupReport(deleted=2)
        product_client.update_product.assert_not_called()
        deleted = [c.args for c in product_client.delete_product.call_args_list]
        assert deleted == [(1,), (2,)]

    def test_reprices_expensive_products_before_delete(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(
                payloads.product(
                    product_id=4, name="Gadget", description="steel", price=150.0
                )
            ),
            page(),
        ]
        product_client.update_product.return_value = response(200)
        product_client.delete_product.return_value = response(204)

        report = service.clean_up_all_products()

        assert report.deleted == 1
        product_client.update_product.assert_called_once_with(
            4, NewProduct(name="Gadget", description="steel", price=DISCOUNTED_PRICE)
        )

    def test_skips_expensive_multiple_of_three(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=9, price=500.0)),
        ]

        report = service.clean_up_all_products()

        assert report == CleanupReport(skipped=1)
        product_client.update_product.assert_not_called()
        product_client.delete_product.assert_not_called()

    def test_retries_delete_then_records_failure(
        self,
        service: ProductCleanupService,
        product_client: Mock,
        error_log: ErrorLog,
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=5, price=10.0)),
        ]
        product_client.delete_product.return_value = response(500)

        report = service.clean_up_all_products()

        assert report == CleanupReport(failed=1)
        assert product_client.delete_product.call_count == 3
        assert error_log.path.read_text() == (
            "2023-01-03T10:00:00 ERROR: Failed to delete product id=5\n"
        )

    def test_failed_update_skips_delete(
        self,
        service: ProductCleanupService,
        product_client: Mock,
        error_log: ErrorLog,
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=4, price=150.0)),
        ]
        product_client.update_product.side_effect = requests.ConnectionError("reset")

        report = service.clean_up_all_products()

        assert report.failed == 1
        assert product_client.update_product.call_count == 3
        product_client.delete_product.assert_not_called()
        assert "Failed to update product id=4" in error_log.path.read_text()

    def test_walks_pages_when_nothing_deleted(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        """Undeletable pages are stepped over using totalPages."""
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=3, price=300.0), total_pages=2),
            page(payloads.product(product_id=6, price=300.0), total_pages=2),
        ]

        report = service.clean_up_all_products(page_size=1)

        assert report == CleanupReport(skipped=2)
        pages = [c.args for c in product_client.list_products_page.call_args_list]
        assert pages == [(0, 1), (1, 1)]

    def test_rereads_page_after_deletes(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        """Deleting shifts products up, so the same page is read again."""
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=1, price=10.0), total_pages=2),
            page(payloads.product(product_id=2, price=10.0), total_pages=1),
            page(total_pages=0),
        ]
        product_client.delete_product.return_value = response(204)

        report = service.clean_up_all_products(page_size=1)

        assert report.deleted == 2
        pages = [c.args for c in product_client.list_products_page.call_args_list]
        assert pages == [(0, 1), (0, 1), (0, 1)]

    def test_stops_without_total_pages(
        self, service: ProductCleanupService, product_client: Mock
    ) -> None:
        product_client.list_products_page.side_effect = [
            page(payloads.product(product_id=3, price=300.0), total_pages=None),
        ]

        report = service.clean_up_all_products()

        assert report.skipped == 1
        assert product_client.list_products_page.call_count == 1

    def test_page_error_is_recorded(
        self,
        service: ProductCleanupService,
        product_client: Mock,
        error_log: ErrorLog,
    ) -> None:
        product_client.list_products_page.return_value = response(500, text="boom")

        report = service.clean_up_all_products()

        assert report == CleanupReport(failed=1)
        assert "Failed to load product page 0" in error_log.path.read_text()


class TestUserCleanup:
    """Tests for UserCleanupService."""

    @pytest.fixture
    def user_client(self) -> Mock:
        """Create mock user client."""
        return Mock(spec=UserClient)

    @pytest.fixture
    def service(self, user_client: Mock, error_log: ErrorLog) -> UserCleanupService:
        """Create user cleanup service."""
        return UserCleanupService(client=user_client, error_log=error_log)

    def test_deletes_all_users(
        self, service: UserCleanupService, user_client: Mock, error_log: ErrorLog
    ) -> None:
        user_client.list_users.return_value = UserFactory.batch(3)
        user_client.delete_user.return_value = response(200)

        report = service.clean_up_all_users()

        assert report == CleanupReport(deleted=3)

    def test_no_users(
        self, service: UserCleanupService, user_client: Mock, error_log: ErrorLog
    ) -> None:
        user_client.list_users.return_value = []

        report = service.clean_up_all_users()

        assert report == CleanupReport()
        user_client.delete_user.assert_not_called()

    def test_records_failed_deletes(
        self, service: UserCleanupService, user_client: Mock, error_log: ErrorLog
    ) -> None:
        users = UserFactory.batch(2)
        user_client.list_users.return_value = users
        user_client.delete_user.side_effect = [
            response(404),
            requests.ConnectionError("reset"),
        ]

        report = service.clean_up_all_users()

        assert report == CleanupReport(failed=2)
        lines = error_log.path.read_text().splitlines()
        assert lines[0].endswith(f"Failed to delete user id={users[0].id}: status 404")
        assert len(lines) == 2

    def test_listing_failure(
        self, service: UserCleanupService, user_client: Mock, error_log: ErrorLog
    ) -> None:
        user_client.list_users.side_effect = ApiError("Failed to list users", 500, "")

        report = service.clean_up_all_users()

        assert report == CleanupReport(failed=1)
