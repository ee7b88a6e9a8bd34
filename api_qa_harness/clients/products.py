"""Client for the /api/products endpoints."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import ClassVar

import requests

from api_qa_harness.clients.base import ApiClient, ApiError
from api_qa_harness.models.product import NewProduct, Product, ProductPage

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProductClient(ApiClient):
    """Product CRUD calls."""

    resource: ClassVar[str] = "products_path"

    def create_product(self, product: NewProduct) -> requests.Response:
        return self.request("POST", json=product.model_dump(exclude_none=True))

    def create_product_batch(
        self, products: Iterable[NewProduct]
    ) -> Sequence[requests.Response]:
        """Create products one by one; transport errors are logged and skipped."""
        responses: list[requests.Response] = []
        for product in products:
            try:
                response = self.create_product(product)
            except requests.RequestException as e:
                log.error("Failed to create product %s: %s", product.name, e)
                continue
            log.info(
                "Created product %s, status %d", product.name, response.status_code
            )
            responses.append(response)
        return responses

    def get_product(self, product_id: int) -> requests.Response:
        return self.request("GET", f"/{product_id}")

    def get_product_or_raise(self, product_id: int) -> Product:
        """Fetch a product, requiring a 200 response."""
        response = self.get_product(product_id)
        if response.status_code != 200:
            raise ApiError(
                f"Failed to get product {product_id}",
                response.status_code,
                response.text,
            )
        return Product.model_validate(response.json())

    def list_products_page(self, page: int, size: int) -> requests.Response:
        return self.request("GET", "/", params={"page": page, "size": size})

    def list_products(self) -> Sequence[Product]:
        """Fetch the first page of products with server-side paging defaults."""
        response = self.request("GET")
        if response.status_code != 200:
            raise ApiError(
                "Failed to list products", response.status_code, response.text
            )
        return ProductPage.model_validate(response.json()).content

    def list_product_ids(self) -> Sequence[int]:
        return [product.id for product in self.list_products()]

    def update_product(self, product_id: int, product: NewProduct) -> requests.Response:
        return self.request(
            "PUT", f"/{product_id}", json=product.model_dump(exclude_none=True)
        )

    def delete_product(self, product_id: int) -> requests.Response:
        return self.request("DELETE", f"/{product_id}")

    def delete_products(self, product_ids: Iterable[int]) -> requests.Response:
        """Bulk delete, ids go in the request body."""
        return self.request("DELETE", json=list(product_ids))

    def delete_all_products(self) -> requests.Response:
        return self.request("DELETE")
