"""
Database connection management.

``ConnectionManager`` owns the SQLAlchemy engine shared by all repositories.
It opens the engine with a bounded number of fixed-delay retries, checks
liveness before every repository operation and transparently reconnects
when the check fails.

Statements are written in the dialect-neutral form described in
``ftp_user_svc.core.dialect`` and run one per short transaction, which
gives the per-statement autocommit behaviour the repositories rely on.
"""

import itertools
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Row, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from ftp_user_svc.core.dialect import Dialect, resolve_data_source
from ftp_user_svc.core.exceptions import ConfigurationError, DatabaseConnectionError
from ftp_user_svc.core.logging_config import get_logger
from ftp_user_svc.core.retry import retry_with_fixed_delay
from ftp_user_svc.models.base import Base

logger = get_logger(__name__)

# connection retry constants
CONNECTION_RETRY_ATTEMPTS = 10
RETRY_SLEEP_SECONDS = 5.0

_PLACEHOLDER = re.compile(r"\?|\$(\d+)")


def bind_positional(statement: str, args: Sequence[Any]) -> Tuple[TextClause, Dict[str, Any]]:
    """
    Turn an adapted statement and positional arguments into a text clause.

    SQLAlchemy binds by name, so each ``?`` (in order) or ``$n`` marker is
    mapped onto the bind parameter ``p<n>``.

    Example:
        >>> clause, params = bind_positional('select 1 where "a" = $1', ["x"])
        >>> str(clause), params
        ('select 1 where "a" = :p1', {'p1': 'x'})
    """
    counter = itertools.count(1)

    def _name(match: "re.Match[str]") -> str:
        number = match.group(1) or next(counter)
        return f":p{number}"

    clause = text(_PLACEHOLDER.sub(_name, statement))
    params = {f"p{position}": value for position, value in enumerate(args, start=1)}
    return clause, params


class ConnectionManager:
    """
    Owns the live engine for one dialect.

    Attributes:
        dialect: Dialect resolved from the connection string
        url: SQLAlchemy engine URL
        retry_attempts: Connection attempts before giving up
        retry_delay: Seconds between connection attempts
        engine: Open engine, or None before the first connect()
    """

    def __init__(
        self,
        dialect: Dialect,
        url: str,
        retry_attempts: int = CONNECTION_RETRY_ATTEMPTS,
        retry_delay: float = RETRY_SLEEP_SECONDS,
        engine_options: Optional[Dict[str, Any]] = None,
    ):
        self.dialect = dialect
        self.url = url
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.engine_options = dict(engine_options or {})
        self.engine: Optional[Engine] = None

    @classmethod
    def from_data_source(cls, data_source: str, **kwargs: Any) -> "ConnectionManager":
        """
        Build a manager from a ``<scheme>://<rest>`` connection string.

        Raises:
            ConfigurationError: If the scheme is missing or unsupported
        """
        dialect, url = resolve_data_source(data_source)
        return cls(dialect, url, **kwargs)

    @property
    def safe_url(self) -> str:
        """Engine URL with the password masked, for logging."""
        try:
            return make_url(self.url).render_as_string(hide_password=True)
        except ArgumentError:
            return f"{self.dialect.name}://<unparseable>"

    def _open_engine(self) -> Engine:
        engine = create_engine(
            self.url,
            future=True,
            echo=False,
            # statement parameters include passwords; keep them out of errors
            hide_parameters=True,
            **self.dialect.pool_options,
            **self.engine_options,
        )
        try:
            # create_engine is lazy; check out one connection to prove it works
            with engine.connect():
                pass
        except SQLAlchemyError:
            engine.dispose()
            raise
        return engine

    def connect(self) -> None:
        """
        Open the engine, retrying with a fixed delay.

        Only driver errors are retried. A URL SQLAlchemy cannot use (bad
        syntax, driver not installed) fails on the first attempt.

        Raises:
            ConfigurationError: If the engine URL is rejected
            DatabaseConnectionError: If every attempt failed. The last
                driver error is chained as ``__cause__``.
        """
        logger.info(
            f"Connecting to datasource {self.safe_url}",
            extra={"dialect": self.dialect.name},
        )

        open_engine = retry_with_fixed_delay(
            max_attempts=self.retry_attempts,
            delay=self.retry_delay,
            exceptions=(DBAPIError,),
        )(self._open_engine)

        try:
            engine = open_engine()
        except ArgumentError as e:
            raise ConfigurationError(
                f"unusable {self.dialect.name} datasource {self.safe_url}"
            ) from e
        except DBAPIError as e:
            raise DatabaseConnectionError(
                f"could not connect to {self.dialect.name} datasource after "
                f"{self.retry_attempts} attempts: {e}",
                attempts=self.retry_attempts,
            ) from e

        previous, self.engine = self.engine, engine
        if previous is not None:
            previous.dispose()

        logger.info("Connected to datasource", extra={"dialect": self.dialect.name})

    def ping(self) -> None:
        """Run a trivial query on a pooled connection."""
        if self.engine is None:
            raise DatabaseConnectionError("not connected")
        with self.engine.connect() as conn:
            conn.exec_driver_sql("select 1")

    def ensure_live(self) -> None:
        """
        Make sure the engine answers, reconnecting if it does not.

        Every repository operation calls this first and aborts if it raises.

        Raises:
            DatabaseConnectionError: If the ping failed and reconnecting failed too
        """
        if self.engine is None:
            self.connect()
            return

        try:
            self.ping()
        except SQLAlchemyError as e:
            logger.warning(
                f"Database ping failed, reconnecting: {e}",
                extra={"dialect": self.dialect.name},
            )
            self.connect()

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise DatabaseConnectionError("not connected")
        return self.engine

    def execute(self, query: str, *args: Any) -> int:
        """
        Run a data-modifying statement.

        Args:
            query: Dialect-neutral statement
            *args: Positional parameters, one per ``?``

        Returns:
            Number of rows affected
        """
        clause, params = bind_positional(self.dialect.adapt(query), args)
        with self._require_engine().begin() as conn:
            result = conn.execute(clause, params)
            return result.rowcount

    def query(self, query: str, *args: Any) -> List[Row]:
        """Run a select and return all rows."""
        clause, params = bind_positional(self.dialect.adapt(query), args)
        with self._require_engine().begin() as conn:
            return list(conn.execute(clause, params).all())

    def query_row(self, query: str, *args: Any) -> Optional[Row]:
        """Run a select and return its first row, or None."""
        clause, params = bind_positional(self.dialect.adapt(query), args)
        with self._require_engine().begin() as conn:
            return conn.execute(clause, params).first()

    def create_schema(self) -> None:
        """
        Create the ftp_account and ftp_mapping tables if they are missing.

        This is not a migration tool: existing tables are left untouched.
        """
        # Import models so their tables are registered on the metadata
        from ftp_user_svc import models  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
