"""
Utility functions for the Storefront API
"""
import math
import random
import string
import time
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
CENTS = Decimal('0.01')


@dataclass
class PageMeta:
    """Pagination metadata returned alongside a page of results."""
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def paginate(queryset, page: int, limit: int):
    """
    Slice a queryset into one page and count the full result set.
    """
    total = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])
    return items, PageMeta(page=page, limit=limit, total=total)


def to_money(value: Any) -> Decimal:
    """Round a number to two decimal places, half-up."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Convert a money amount to the smallest currency unit (e.g. paise)."""
    return int((to_money(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def generate_order_number(now: Optional[float] = None) -> str:
    """
    Build a human-readable order number: ORD-<epoch millis>-<9 random chars>.

    Uniqueness is practical, not guaranteed; the database constraint is final.
    """
    millis = int((now if now is not None else time.time()) * 1000)
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=9))
    return f"ORD-{millis}-{suffix}"


def truncate_for_display(text: str, max_length: int = 100) -> str:
    """
    Truncate text for display purposes.
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
