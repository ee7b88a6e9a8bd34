"""Removal of all products and users from the API under test."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

import requests

from api_qa_harness.clients.base import ApiError
from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.error_log import ErrorLog
from api_qa_harness.models.product import Product, ProductPage
from api_qa_harness.models.result import CleanupReport
from api_qa_harness.retry import (
    ACCEPTABLE_CODES,
    DEFAULT_ATTEMPTS,
    DEFAULT_DELAY,
    retry,
)
from api_qa_harness.rules import DELETE_PRICE_CEILING, is_multiple_of_three

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DISCOUNTED_PRICE = 99.99

type Disposition = Literal["deleted", "skipped", "failed"]


@dataclass(frozen=True, kw_only=True)
class ProductCleanupService:
    """Deletes every product, page by page.

    Products above the delete price ceiling are first repriced to
    ``DISCOUNTED_PRICE`` because the server refuses to delete them. Products
    whose id is a multiple of three cannot be updated and are skipped.
    """

    client: ProductClient
    error_log: ErrorLog = field(default_factory=ErrorLog)
    attempts: int = DEFAULT_ATTEMPTS
    delay: float = DEFAULT_DELAY

    def clean_up_all_products(
        self, page_size: int = DEFAULT_PAGE_SIZE
    ) -> CleanupReport:
        """Walk the listing and remove every product.

        Deleting shifts later products onto the current page, so a page is
        read again after anything on it was deleted. Products already handled
        are not handled twice.
        """
        log.info("Starting full product cleanup")
        outcomes: dict[int, Disposition] = {}
        load_failures = 0
        page = 0

        while True:
            try:
                listing = self._load_page(page, page_size)
            except (ApiError, requests.RequestException, ValueError) as e:
                self.error_log.error(f"Failed to load product page {page}: {e}")
                load_failures += 1
                break

            fresh = [p for p in listing.content if p.id not in outcomes]
            if not fresh:
                log.info("Page %d: no products left to handle", page)
                if not listing.content:
                    break
            else:
                log.info("Page %d: handling %d product(s)", page, len(fresh))

            deleted_any = False
            for product in fresh:
                outcomes[product.id] = self._remove(product)
                deleted_any = deleted_any or outcomes[product.id] == "deleted"

            if deleted_any:
                continue
            if listing.total_pages is None:
                log.warning("Listing has no totalPages, stopping")
                break
            page += 1
            if page >= listing.total_pages:
                break

        report = CleanupReport(
            deleted=sum(1 for o in outcomes.values() if o == "deleted"),
            failed=load_failures
            + sum(1 for o in outcomes.values() if o == "failed"),
            skipped=sum(1 for o in outcomes.values() if o == "skipped"),
        )
        log.info(
            "Product cleanup finished: deleted=%d failed=%d skipped=%d",
            report.deleted,
            report.failed,
            report.skipped,
        )
        return report

    def _load_page(self, page: int, page_size: int) -> ProductPage:
        response = self.client.list_products_page(page, page_size)
        if response.status_code != 200:
            raise ApiError(
                f"Failed to list page {page}", response.status_code, response.text
            )
        return ProductPage.model_validate(response.json())

    def _remove(self, product: Product) -> Disposition:
        if product.price > DELETE_PRICE_CEILING:
            if is_multiple_of_three(product.id):
                log.warning("Product %d cannot be updated (id %% 3 == 0)", product.id)
                return "skipped"

            log.info(
                "Product %d costs more than $%.0f (%.2f), lowering price to %.2f",
                product.id,
                DELETE_PRICE_CEILING,
                product.price,
                DISCOUNTED_PRICE,
            )
            discounted = product.with_price(DISCOUNTED_PRICE).to_payload()
            if not self._retry(
                lambda: self.client.update_product(product.id, discounted)
            ):
                self.error_log.error(f"Failed to update product id={product.id}")
                return "failed"

        if not self._retry(lambda: self.client.delete_product(product.id)):
            self.error_log.error(f"Failed to delete product id={product.id}")
            return "failed"

        log.info("Deleted product id=%d", product.id)
        return "deleted"

    def _retry(self, action: Callable[[], requests.Response]) -> bool:
        return retry(action, self.attempts, ACCEPTABLE_CODES, delay=self.delay)


@dataclass(frozen=True, kw_only=True)
class UserCleanupService:
    """Deletes every user; the user listing is returned in one piece."""

    client: UserClient
    error_log: ErrorLog = field(default_factory=ErrorLog)

    def clean_up_all_users(self) -> CleanupReport:
        log.info("Loading all users for deletion")
        try:
            users = self.client.list_users()
        except (ApiError, requests.RequestException, ValueError) as e:
            self.error_log.error(f"Failed to load users: {e}")
            return CleanupReport(failed=1)

        if not users:
            log.info("No users to delete")
            return CleanupReport()

        log.info("Found %d user(s) to delete", len(users))
        deleted = failed = 0
        for user in users:
            try:
                response = self.client.delete_user(user.id)
            except requests.RequestException as e:
                self.error_log.error(f"Failed to delete user id={user.id}: {e}")
                failed += 1
                continue
            if response.status_code in ACCEPTABLE_CODES:
                log.info("Deleted user id=%d", user.id)
                deleted += 1
            else:
                self.error_log.error(
                    f"Failed to delete user id={user.id}: status {response.status_code}"
                )
                failed += 1

        log.info("User cleanup finished: deleted=%d failed=%d", deleted, failed)
        return CleanupReport(deleted=deleted, failed=failed)
