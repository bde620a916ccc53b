"""Page/limit pagination used by the list endpoints."""

from django.conf import settings
from django.db.models import QuerySet
from pydantic import BaseModel, Field, field_validator


class PageQuery(BaseModel):
    """Query parameters of a paginated listing.

    Attributes:
        page: 1-based page number.
        limit: Page size, bounded by ``settings.CATALOG_MAX_PAGE_SIZE``.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        cap = getattr(settings, "CATALOG_MAX_PAGE_SIZE", 100)
        if v > cap:
            raise ValueError(f"limit must be at most {cap}")
        return v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def paginate(qs: QuerySet, query: PageQuery) -> tuple[list, int]:
    """Slice ``qs`` to the requested page.

    Returns:
        tuple[list, int]: ``(items, total)``. Pages past the end yield an
        empty list together with the real total.
    """
    total = qs.count()
    if query.offset >= total:
        return [], total
    items = list(qs[query.offset:query.offset + query.limit])
    return items, total
