"""Client-side pagination over an already fetched, ordered list."""
import math
from dataclasses import dataclass, field
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")

PAGE_SIZE_OPTIONS = (5, 10, 25, 50)


def paginate(items: Sequence[T], page_size: int, page: int) -> List[T]:
    """Items ``[(page-1)*page_size, page*page_size)``; empty past the last page."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    if page < 1:
        raise ValueError("page must be >= 1")
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


@dataclass
class Paginator(Generic[T]):
    """Page state for a table; changing the page size goes back to page 1."""

    items: Sequence[T]
    page_size: int = 5
    page: int = 1

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.items) / self.page_size))

    @property
    def current(self) -> List[T]:
        return paginate(self.items, self.page_size, self.page)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.page = 1

    def go_to(self, page: int) -> None:
        self.page = min(max(page, 1), self.total_pages)

    def next(self) -> None:
        self.go_to(self.page + 1)

    def previous(self) -> None:
        self.go_to(self.page - 1)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def summary(self, noun: str = "students") -> str:
        """Footer text, e.g. 'Showing 6 to 10 of 12 students'."""
        total = len(self.items)
        if total == 0:
            return f"Showing 0 of 0 {noun}"
        first = (self.page - 1) * self.page_size + 1
        last = min(self.page * self.page_size, total)
        return f"Showing {first} to {last} of {total} {noun}"


@dataclass
class LimitedView(Generic[T]):
    """Truncated list for widgets with a fixed display limit."""

    items: List[T] = field(default_factory=list)
    total: int = 0

    @property
    def has_more(self) -> bool:
        return self.total > len(self.items)


def limited_view(items: Sequence[T], limit: int) -> LimitedView[T]:
    """First ``limit`` items; ``has_more`` drives the 'view all' link."""
    if limit < 0:
        raise ValueError("limit must be >= 0")
    return LimitedView(items=list(items[:limit]), total=len(items))
