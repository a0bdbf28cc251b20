"""Tests for list pagination."""

import pytest

from app.services.olt.pagination import paginate

ITEMS = list(range(1, 26))


def test_last_partial_page():
    page = paginate(ITEMS, page=3, page_size=10)
    assert page.data == [21, 22, 23, 24, 25]
    assert page.page_count == 3
    assert page.total_rows == 25
    assert page.limit == 10


def test_out_of_range_page_is_empty():
    page = paginate(ITEMS, page=4, page_size=10)
    assert page.data == []
    assert page.page == 4
    assert page.total_rows == 25


@pytest.mark.parametrize(
    "page_number, page_size, expected_page, expected_limit",
    [(0, 10, 1, 10), (-3, 10, 1, 10), (1, 0, 1, 10), (1, -1, 1, 10), (1, 500, 1, 100)],
)
def test_clamps_page_and_size(page_number, page_size, expected_page, expected_limit):
    page = paginate(ITEMS, page=page_number, page_size=page_size)
    assert page.page == expected_page
    assert page.limit == expected_limit


def test_custom_defaults():
    page = paginate(ITEMS, page=1, page_size=0, default_page_size=5, max_page_size=20)
    assert page.data == [1, 2, 3, 4, 5]
    assert page.page_count == 5
    assert paginate(ITEMS, page=1, page_size=50, max_page_size=20).limit == 20


def test_empty_input():
    page = paginate([], page=1, page_size=10)
    assert page.data == []
    assert page.page_count == 0
    assert page.total_rows == 0
