"""
Tests for page normalization, page counting and the search filter.
"""

import pytest

from ftp_user_svc.repositories.pagination import (
    DEFAULT_PAGE_SIZE,
    PageRequest,
    count_pages,
    search_filter,
)


class TestPageRequest:
    """Tests for PageRequest normalization."""

    def test_zero_means_defaults(self):
        request = PageRequest()

        assert request.normalized_page == 1
        assert request.normalized_page_size == DEFAULT_PAGE_SIZE == 30
        assert request.offset == 0

    def test_offset(self):
        request = PageRequest(page=16, page_size=9)

        assert request.offset == 135

    @pytest.mark.parametrize("page, page_size", [(-1, 0), (0, -5)])
    def test_negative_rejected(self, page, page_size):
        with pytest.raises(ValueError):
            PageRequest(page=page, page_size=page_size)


class TestCountPages:
    """Tests for count_pages (ceiling division)."""

    @pytest.mark.parametrize(
        "total_items, page_size, expected",
        [
            (0, 30, 0),
            (1, 30, 1),
            (30, 30, 1),
            (31, 30, 2),
            (138, 9, 16),
            (300, 30, 10),
        ],
    )
    def test_count_pages(self, total_items, page_size, expected):
        assert count_pages(total_items, page_size) == expected


class TestSearchFilter:
    """Tests for search_filter."""

    def test_empty_search_has_no_clause(self):
        clause, args = search_filter(("username", "description"), "")

        assert clause == ""
        assert args == []

    def test_contains_pattern_per_column(self):
        """
        Test every searchable column gets its own placeholder and argument.
        """
        # Act
        clause, args = search_filter(("username", "description"), "bob")

        # Assert
        assert clause == " where `username` like ? or `description` like ?"
        assert args == ["%bob%", "%bob%"]
