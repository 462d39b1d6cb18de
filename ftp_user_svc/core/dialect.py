"""
SQL dialect support.

Queries are written once in a dialect-neutral form: identifiers quoted with
backticks and positional ``?`` placeholders. A ``Dialect`` rewrites that
form for its engine, builds the engine-specific limit clause and classifies
driver errors by matching known fragments of their text.

Two dialects are supported:
- MySQL: backtick quoting, ``?`` placeholders, ``limit offset, count``
- PostgreSQL: double-quote quoting, ``$1..$n`` placeholders,
  ``limit count offset offset``

The dialect is resolved once, from the scheme of the connection string,
and does not change for the lifetime of a connection manager.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from ftp_user_svc.core.exceptions import ConfigurationError


MYSQL_DRIVER_NAME = "mysql"
POSTGRESQL_DRIVER_NAME = "postgres"

# Highest placeholder number the numbered rewrite will emit
MAX_PLACEHOLDERS = 10


class ErrorKind(str, Enum):
    """Classification of a driver error"""

    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    OTHER = "other"


@dataclass(frozen=True)
class Dialect:
    """
    One supported SQL engine.

    Attributes:
        name: Dialect name (``mysql`` or ``postgres``)
        driver: SQLAlchemy driver name used to build the engine URL
        identifier_quote: Character used to quote identifiers
        numbered_placeholders: Use ``$1..$n`` instead of ``?``
        unique_violation: Error text fragment of a primary/unique key violation
        foreign_key_violation: Error text fragment of a foreign key violation
        limit_template: Format string for the pagination clause
        pool_options: Extra ``create_engine`` keyword arguments
    """

    name: str
    driver: str
    identifier_quote: str
    numbered_placeholders: bool
    unique_violation: str
    foreign_key_violation: str
    limit_template: str
    pool_options: Dict[str, Any] = field(default_factory=dict, compare=False)

    def adapt(self, query: str) -> str:
        """
        Rewrite a dialect-neutral query for this dialect.

        Args:
            query: Query with backtick-quoted identifiers and ``?`` placeholders

        Returns:
            Query ready for this dialect's driver. Unchanged for MySQL.

        Raises:
            ValueError: If numbered placeholders are required and the query
                holds more than MAX_PLACEHOLDERS of them

        Example:
            >>> POSTGRESQL.adapt("select `id` from `t` where `a` = ? and `b` = ?")
            'select "id" from "t" where "a" = $1 and "b" = $2'
        """
        result = query
        if self.identifier_quote != "`":
            result = result.replace("`", self.identifier_quote)

        if self.numbered_placeholders:
            count = result.count("?")
            if count > MAX_PLACEHOLDERS:
                raise ValueError(
                    f"query has {count} placeholders; at most "
                    f"{MAX_PLACEHOLDERS} are supported for {self.name}"
                )
            for position in range(1, count + 1):
                result = result.replace("?", f"${position}", 1)

        return result

    def limit_clause(self, page_size: int, offset: int) -> str:
        """Return the pagination clause, with a leading space."""
        return self.limit_template.format(limit=page_size, offset=offset)

    def classify(self, error: BaseException) -> ErrorKind:
        """
        Classify a driver error from its text.

        Drivers do not expose a portable structured code, so the message is
        searched for this dialect's known violation fragments.
        """
        message = str(error)
        if self.unique_violation and self.unique_violation in message:
            return ErrorKind.UNIQUE
        if self.foreign_key_violation and self.foreign_key_violation in message:
            return ErrorKind.FOREIGN_KEY
        return ErrorKind.OTHER

    def is_unique_violation(self, error: BaseException) -> bool:
        return self.classify(error) is ErrorKind.UNIQUE

    def is_foreign_key_violation(self, error: BaseException) -> bool:
        return self.classify(error) is ErrorKind.FOREIGN_KEY


MYSQL = Dialect(
    name=MYSQL_DRIVER_NAME,
    driver="mysql+pymysql",
    identifier_quote="`",
    numbered_placeholders=False,
    # errors 1062 and 1452
    unique_violation="Duplicate entry",
    foreign_key_violation="a foreign key constraint fails",
    limit_template=" limit {offset}, {limit}",
)

POSTGRESQL = Dialect(
    name=POSTGRESQL_DRIVER_NAME,
    driver="postgresql+psycopg2",
    identifier_quote='"',
    numbered_placeholders=True,
    unique_violation="duplicate key value violates unique constraint",
    foreign_key_violation="violates foreign key constraint",
    limit_template=" limit {limit} offset {offset}",
    # 30 idle connections, 100 open at most, recycled after an hour
    pool_options={
        "pool_size": 30,
        "max_overflow": 70,
        "pool_recycle": 3600,
    },
)

_DIALECTS_BY_SCHEME = {
    "mysql": MYSQL,
    "postgres": POSTGRESQL,
    "postgresql": POSTGRESQL,
}


def resolve_data_source(data_source: str) -> Tuple[Dialect, str]:
    """
    Resolve a connection string to its dialect and SQLAlchemy URL.

    Args:
        data_source: Connection string of the form ``<scheme>://<rest>``.
            The scheme may carry an explicit driver, e.g. ``mysql+mysqldb``.

    Returns:
        Tuple of (dialect, SQLAlchemy engine URL)

    Raises:
        ConfigurationError: If the scheme is missing or not supported

    Example:
        >>> dialect, url = resolve_data_source("postgres://u:p@db:5432/ftpusers")
        >>> dialect.name, url
        ('postgres', 'postgresql+psycopg2://u:p@db:5432/ftpusers')
    """
    scheme, separator, rest = data_source.partition("://")
    if not separator or not scheme:
        raise ConfigurationError("protocol not specified in data source")

    base, _, driver = scheme.partition("+")
    dialect = _DIALECTS_BY_SCHEME.get(base.lower())
    if dialect is None:
        raise ConfigurationError(f"protocol {scheme} not supported")

    # explicit drivers are kept; "postgres+x" still needs SQLAlchemy's name
    if driver:
        drivername = f"{dialect.driver.split('+')[0]}+{driver}"
    else:
        drivername = dialect.driver

    return dialect, f"{drivername}://{rest}"
