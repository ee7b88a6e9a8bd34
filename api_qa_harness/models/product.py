"""Models for products exchanged with the /api/products endpoints."""

from collections.abc import Sequence

from pydantic import ConfigDict, Field

from api_qa_harness.models.base import Model


class NewProduct(Model):
    """Product payload sent on create and update."""

    name: str = Field(..., description="Product name")
    description: str | None = Field(default=None, description="Free-form description")
    price: float = Field(..., description="Price in dollars")


class Product(NewProduct):
    """Product as returned by the server."""

    id: int = Field(..., description="Server-assigned identifier")

    def with_price(self, price: float) -> "Product":
        """Return a copy of the product with a different price."""
        return self.model_copy(update={"price": price})

    def to_payload(self) -> NewProduct:
        """Drop the identifier for use as a request body."""
        return NewProduct(
            name=self.name, description=self.description, price=self.price
        )


class ProductPage(Model):
    """One page of the paginated product listing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: Sequence[Product] = Field(default_factory=list)
    total_pages: int | None = Field(default=None, alias="totalPages")
    number: int = Field(default=0, description="Zero-based page index")
    size: int = Field(default=20)
