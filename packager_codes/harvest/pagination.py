"""Offset/max pagination over the directory endpoints."""

from __future__ import annotations

from typing import Callable, Iterator, TypeVar

T = TypeVar("T")


def iter_pages(
    fetch_page: Callable[[int, int], list[T]],
    page_size: int,
    max_pages: int | None = None,
) -> Iterator[list[T]]:
    """Yield pages lazily until an empty or short page, or ``max_pages`` pages.

    ``fetch_page`` receives ``(offset, page_size)``.
    """
    offset = 0
    pages = 0
    while max_pages is None or pages < max_pages:
        page = fetch_page(offset, page_size)
        if not page:
            return
        pages += 1
        yield page
        if len(page) < page_size:
            return
        offset += page_size


def collect_pages(
    fetch_page: Callable[[int, int], list[T]],
    page_size: int,
    max_pages: int | None = None,
) -> list[T]:
    rows: list[T] = []
    for page in iter_pages(fetch_page, page_size, max_pages):
        rows.extend(page)
    return rows
