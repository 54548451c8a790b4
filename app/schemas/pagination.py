"""Offset pagination shared by every list endpoint.

List responses use one envelope shape everywhere:

    {"<plural>": [...], "total": 42, "page": 2, "totalPages": 5}

``total`` is always counted with the same filters as the page itself, so
``totalPages`` matches what the client can actually page through.
Catalogue endpoints that are not paginated report ``page=1``.
"""

import math
from dataclasses import dataclass

from app.schemas.types import ApiModel


@dataclass(frozen=True)
class PageParams:
    """1-based page number and page size."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows, ``limit`` at a time."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


class ListEnvelope(ApiModel):
    """Pagination fields common to every list response."""

    total: int
    page: int
    total_pages: int


def unpaginated(total: int) -> dict:
    """Envelope fields for catalogue lists returned whole."""
    return {"total": total, "page": 1, "total_pages": 1 if total else 0}
