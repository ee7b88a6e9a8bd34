"""Business rules of the product API and the catalog of triaged issues.

The predicates are pure: time-based rules take the instant to evaluate, which
callers obtain from an injected :class:`~api_qa_harness.clock.Clock`.
"""

import re
from collections.abc import Mapping
from datetime import datetime

from pydantic import Field

from api_qa_harness.models.base import Model
from api_qa_harness.models.product import NewProduct, Product

CREATE_PRICE_CEILING = 1000.0
DELETE_PRICE_CEILING = 100.0
MAX_PRICE_CHANGE = 500.0
RESTRICTED_ID_LIMIT = 1000

SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()+=\[\]{}|\\:;\"'<>,?/~`]")


class KnownIssue(Model):
    """A pre-triaged server defect tracked by the suites."""

    issue_id: str = Field(..., description="Tracker identifier, e.g. BUG-QA1-01")
    summary: str = Field(..., description="Documented rule the server violates")
    expected_code: int = Field(..., description="Status code the contract requires")


def _issues(*issues: KnownIssue) -> Mapping[str, KnownIssue]:
    return {issue.issue_id: issue for issue in issues}


KNOWN_ISSUES: Mapping[str, KnownIssue] = _issues(
    KnownIssue(
        issue_id="BUG-QA1-01",
        summary="Products with even ids are not retrievable",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-02",
        summary="Products with ids divisible by 3 cannot be updated",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-03",
        summary="Products with prime ids are not retrievable",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-04",
        summary="Creating a product priced above $1000 is forbidden",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-05",
        summary="Deleting a product priced above $100 is forbidden",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-06",
        summary="Changing a price by more than $500 is forbidden",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA1-07",
        summary="GET /products takes at least 100 ms",
        expected_code=200,
    ),
    KnownIssue(
        issue_id="BUG-QA2-01",
        summary="Updates are forbidden at night (22:00-06:00)",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA2-02",
        summary="Deletes are forbidden on Mondays before 09:00",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA2-03",
        summary="Every 5th minute with seconds < 30 returns 503",
        expected_code=503,
    ),
    KnownIssue(
        issue_id="BUG-QA2-04",
        summary="Product names cannot contain special characters",
        expected_code=400,
    ),
    KnownIssue(
        issue_id="BUG-QA2-05",
        summary="Palindrome product names are reserved",
        expected_code=400,
    ),
    KnownIssue(
        issue_id="BUG-QA2-06",
        summary="At most 5 operations per product name",
        expected_code=429,
    ),
    KnownIssue(
        issue_id="BUG-QA2-07",
        summary="Prices cannot repeat the same digit twice in a row",
        expected_code=400,
    ),
    KnownIssue(
        issue_id="BUG-QA3-01",
        summary="Deleting is impossible with fewer than 10 products",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-02",
        summary="Doubling a price is a forbidden price change",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-03",
        summary="Ids below 1000 are restricted on Sunday mornings",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-04",
        summary="PUT is forbidden during maintenance",
        expected_code=503,
    ),
    KnownIssue(
        issue_id="BUG-QA3-05",
        summary="PUT is forbidden on Wednesdays",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-06",
        summary="Deleting a palindrome id is forbidden",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-07",
        summary="Bulk deleting palindrome ids is forbidden",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-08",
        summary="Bulk deleting regular ids succeeds",
        expected_code=204,
    ),
    KnownIssue(
        issue_id="BUG-QA3-09",
        summary="Bulk delete is impossible with fewer than 10 products",
        expected_code=403,
    ),
    KnownIssue(
        issue_id="BUG-QA3-10",
        summary="Names cannot be palindromes with special characters",
        expected_code=400,
    ),
    KnownIssue(
        issue_id="BUG-QA3-11",
        summary="Creating products is unavailable during maintenance",
        expected_code=503,
    ),
    KnownIssue(
        issue_id="BUG-QA3-12",
        summary="Update with invalid name and price reports the name",
        expected_code=400,
    ),
    KnownIssue(
        issue_id="BUG-TIME-01",
        summary="GET /api/time answers 500 instead of the server clock",
        expected_code=200,
    ),
)


def is_palindrome(value: int) -> bool:
    """Check whether the decimal representation reads the same reversed.

    The sign is part of the representation, so negative numbers are never
    palindromes: ``"-121"`` reversed is ``"121-"``.
    """
    text = str(value)
    return text == text[::-1]


def is_even_id(product_id: int) -> bool:
    """Check whether the id is even."""
    return product_id % 2 == 0


def is_multiple_of_three(product_id: int) -> bool:
    """Check whether the id is divisible by three."""
    return product_id % 3 == 0


def is_prime_id(product_id: int) -> bool:
    """Check whether the id is a prime number."""
    if product_id < 2:
        return False
    divisor = 2
    while divisor * divisor <= product_id:
        if product_id % divisor == 0:
            return False
        divisor += 1
    return True


def exceeds_create_ceiling(price: float) -> bool:
    """Check whether the price is above the creation ceiling."""
    return price > CREATE_PRICE_CEILING


def exceeds_delete_ceiling(price: float) -> bool:
    """Check whether the price is above the deletion ceiling."""
    return price > DELETE_PRICE_CEILING


def is_forbidden_price_change(old_price: float, new_price: float) -> bool:
    """Check whether the price moves by more than the allowed change."""
    return abs(new_price - old_price) > MAX_PRICE_CHANGE


def has_repeated_adjacent_digits(price: float) -> bool:
    """Check the price, rendered with two decimals, for a doubled digit."""
    digits = f"{price:.2f}".replace(".", "").lstrip("-")
    return any(a == b for a, b in zip(digits, digits[1:]))


def has_special_characters(name: str) -> bool:
    """Check whether the name contains a reserved punctuation character."""
    return SPECIAL_CHARACTERS.search(name) is not None


def is_palindrome_name(name: str) -> bool:
    """Check the alphanumeric part of a name, ignoring case."""
    letters = "".join(ch for ch in name.lower() if ch.isalnum())
    return len(letters) > 1 and letters == letters[::-1]


def is_night(now: datetime) -> bool:
    """Between 22:00 and 06:00."""
    return now.hour >= 22 or now.hour < 6


def is_maintenance_window(now: datetime) -> bool:
    """Every fifth minute, during its first 30 seconds."""
    return now.minute % 5 == 0 and now.second < 30


def is_monday_morning(now: datetime) -> bool:
    """Monday before 09:00."""
    return now.weekday() == 0 and now.hour < 9


def is_wednesday(now: datetime) -> bool:
    """Any time on a Wednesday."""
    return now.weekday() == 2


def is_sunday_morning(now: datetime) -> bool:
    """Sunday before noon."""
    return now.weekday() == 6 and now.hour < 12


def get_violation(product_id: int, now: datetime) -> KnownIssue | None:
    """Return the first rule a GET of the product breaks, if any."""
    if is_maintenance_window(now):
        return KNOWN_ISSUES["BUG-QA2-03"]
    if product_id < RESTRICTED_ID_LIMIT and is_sunday_morning(now):
        return KNOWN_ISSUES["BUG-QA3-03"]
    if is_even_id(product_id):
        return KNOWN_ISSUES["BUG-QA1-01"]
    if is_prime_id(product_id):
        return KNOWN_ISSUES["BUG-QA1-03"]
    return None


def create_violation(product: NewProduct, now: datetime) -> KnownIssue | None:
    """Return the first rule creating the product breaks, if any."""
    if is_maintenance_window(now):
        return KNOWN_ISSUES["BUG-QA3-11"]
    if has_special_characters(product.name):
        if is_palindrome_name(product.name):
            return KNOWN_ISSUES["BUG-QA3-10"]
        return KNOWN_ISSUES["BUG-QA2-04"]
    if is_palindrome_name(product.name):
        return KNOWN_ISSUES["BUG-QA2-05"]
    if exceeds_create_ceiling(product.price):
        return KNOWN_ISSUES["BUG-QA1-04"]
    if has_repeated_adjacent_digits(product.price):
        return KNOWN_ISSUES["BUG-QA2-07"]
    return None


def update_violation(
    current: Product, update: NewProduct, now: datetime
) -> KnownIssue | None:
    """Return the first rule replacing ``current`` with ``update`` breaks.

    Name validation wins over price validation when both fail.
    """
    if is_maintenance_window(now):
        return KNOWN_ISSUES["BUG-QA3-04"]
    if is_wednesday(now):
        return KNOWN_ISSUES["BUG-QA3-05"]
    if is_night(now):
        return KNOWN_ISSUES["BUG-QA2-01"]
    if is_multiple_of_three(current.id):
        return KNOWN_ISSUES["BUG-QA1-02"]
    if has_special_characters(update.name):
        return KNOWN_ISSUES["BUG-QA3-12"]
    if is_forbidden_price_change(current.price, update.price):
        return KNOWN_ISSUES["BUG-QA1-06"]
    return None


def delete_violation(
    product: Product, now: datetime, products_total: int
) -> KnownIssue | None:
    """Return the first rule deleting the product breaks, if any."""
    if is_monday_morning(now):
        return KNOWN_ISSUES["BUG-QA2-02"]
    if products_total < 10:
        return KNOWN_ISSUES["BUG-QA3-01"]
    if is_palindrome(product.id):
        return KNOWN_ISSUES["BUG-QA3-06"]
    if exceeds_delete_ceiling(product.price):
        return KNOWN_ISSUES["BUG-QA1-05"]
    return None
