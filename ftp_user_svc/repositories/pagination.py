"""
Pagination over a table with an optional free-text search.

Pages are 1-based. A page of 0 means the first page and a page size of 0
means DEFAULT_PAGE_SIZE. The total page count is recomputed on every call
from the number of rows that match the search.
"""

from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

from sqlalchemy.engine import Row

from ftp_user_svc.core.database import ConnectionManager


DEFAULT_PAGE_SIZE = 30


@dataclass(frozen=True)
class PageRequest:
    """
    Page coordinates as parsed from request parameters.

    Attributes:
        page: 1-based page index, 0 for the default
        page_size: Rows per page, 0 for the default
        search: Substring matched against the searchable columns
    """

    page: int = 0
    page_size: int = 0
    search: str = ""

    def __post_init__(self):
        if self.page < 0 or self.page_size < 0:
            raise ValueError("page and page_size must not be negative")

    @property
    def normalized_page(self) -> int:
        return self.page if self.page > 0 else 1

    @property
    def normalized_page_size(self) -> int:
        return self.page_size if self.page_size > 0 else DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.normalized_page - 1) * self.normalized_page_size


@dataclass
class Page:
    """Rows of one page plus the totals for the whole filtered set."""

    rows: List[Row] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0


def count_pages(total_items: int, page_size: int) -> int:
    """
    Number of pages needed to show total_items rows.

    Example:
        >>> count_pages(138, 9)
        16
        >>> count_pages(0, 30)
        0
    """
    pages, remainder = divmod(total_items, page_size)
    if remainder > 0:
        pages += 1
    return pages


def search_filter(columns: Sequence[str], search: str) -> Tuple[str, List[Any]]:
    """
    Build the where clause for a "contains" search over columns.

    Every column is compared against the same pattern, so the pattern is
    repeated once per column in the returned arguments.
    """
    if not search:
        return "", []

    pattern = f"%{search}%"
    conditions = " or ".join(f"`{column}` like ?" for column in columns)
    return f" where {conditions}", [pattern] * len(columns)


class Paginator:
    """
    Runs the count and page queries for one table.

    Attributes:
        db: Connection manager; its dialect supplies the limit clause
    """

    def __init__(self, db: ConnectionManager):
        self.db = db

    def paginate(
        self,
        table: str,
        columns: Sequence[str],
        search_columns: Sequence[str],
        request: PageRequest,
        key: str = "id",
    ) -> Page:
        """
        Fetch one page of rows ordered by key.

        Args:
            table: Table to read
            columns: Columns to select, in row order
            search_columns: Columns matched by the search term
            request: Page coordinates and search term
            key: Column used for counting and ordering

        Returns:
            Page with the selected rows and totals. A page past the end has
            no rows but still reports the totals.
        """
        filter_clause, filter_args = search_filter(search_columns, request.search)

        qry = f"select count(`{key}`) from `{table}`" + filter_clause
        row = self.db.query_row(qry, *filter_args)
        total_items = int(row[0]) if row is not None else 0

        page_size = request.normalized_page_size
        page = Page(
            total_items=total_items,
            total_pages=count_pages(total_items, page_size),
        )

        selected = ", ".join(f"`{column}`" for column in columns)
        qry = f"select {selected} from `{table}`" + filter_clause + f" order by `{key}`"
        qry += self.db.dialect.limit_clause(page_size, request.offset)

        page.rows = self.db.query(qry, *filter_args)
        return page
