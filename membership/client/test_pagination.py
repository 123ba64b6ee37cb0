"""Tests for client-side pagination."""
import pytest

from membership.client.pagination import Paginator, limited_view, paginate


@pytest.mark.parametrize("count", [0, 1, 4, 5, 6, 23])
@pytest.mark.parametrize("page_size", [1, 5, 10])
def test_pages_reconstruct_sequence(count, page_size):
    items = list(range(count))
    pages = Paginator(items, page_size=page_size).total_pages
    rebuilt = []
    for page in range(1, pages + 1):
        rebuilt.extend(paginate(items, page_size, page))
    assert rebuilt == items


def test_page_beyond_end_is_empty():
    assert paginate([1, 2, 3], 2, 5) == []


def test_invalid_arguments():
    with pytest.raises(ValueError):
        paginate([1], 0, 1)
    with pytest.raises(ValueError):
        paginate([1], 1, 0)


class TestPaginator:
    def test_page_size_change_resets_page(self):
        p = Paginator(list(range(30)), page_size=5)
        p.go_to(4)
        assert p.page == 4
        p.set_page_size(10)
        assert p.page == 1
        assert p.current == list(range(10))

    def test_navigation_clamps(self):
        p = Paginator(list(range(12)), page_size=5)
        p.previous()
        assert p.page == 1
        p.next()
        p.next()
        p.next()
        assert p.page == 3
        assert not p.has_next
        assert p.current == [10, 11]

    def test_summary(self):
        p = Paginator(list(range(12)), page_size=5)
        p.next()
        assert p.summary() == "Showing 6 to 10 of 12 students"
        assert Paginator([]).summary() == "Showing 0 of 0 students"
        assert Paginator([]).total_pages == 1


def test_limited_view():
    view = limited_view(list(range(8)), 5)
    assert view.items == [0, 1, 2, 3, 4]
    assert view.total == 8
    assert view.has_more
    assert not limited_view([1, 2], 5).has_more
