"""
FTP account repository.

CRUD operations on ftp_account. Uniqueness conflicts are recognised from
the driver error text and reported as AccountExistsError; zero-row
lookups, updates and deletes are reported as not-found errors.
"""

from sqlalchemy.exc import SQLAlchemyError

from ftp_user_svc.core.database import ConnectionManager
from ftp_user_svc.core.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    UserNotFoundError,
)
from ftp_user_svc.core.logging_config import get_logger
from ftp_user_svc.repositories.pagination import PageRequest, Paginator
from ftp_user_svc.schemas.account import Account, AccountCollection

logger = get_logger(__name__)

ACCOUNT_TABLE = "ftp_account"
DEFAULT_LOGIN_SYSTEM = "BillSys1"
DISPLAY_COLUMNS = ("id", "username", "description")
SEARCH_COLUMNS = ("username", "description")


class AccountRepository:
    """
    Repository for ftp_account rows.

    Every operation checks the connection first and aborts with
    DatabaseConnectionError if it cannot be re-established.

    Attributes:
        db: Shared connection manager
        login_system: Mapping system whose ids are listed as login folders
    """

    def __init__(self, db: ConnectionManager, login_system: str = DEFAULT_LOGIN_SYSTEM):
        self.db = db
        self.login_system = login_system
        self.paginator = Paginator(db)

    def _log_failure(self, operation: str, error: Exception) -> None:
        logger.error(
            f"{operation} failed: {error}",
            extra={"operation": operation, "dialect": self.db.dialect.name},
        )

    def lookup(self, username: str) -> Account:
        """
        Fetch the account for a login, password included.

        The account's folders are the external ids mapped to it under the
        login system, ordered by id. An account without mappings is still
        found and has no folders.

        Raises:
            UserNotFoundError: If no account has this username
        """
        self.db.ensure_live()

        qry = (
            "select `id`, `username`, `description`, `password` "
            "from `ftp_account` where `username` = ?"
        )
        try:
            row = self.db.query_row(qry, username)
        except SQLAlchemyError as e:
            self._log_failure("lookup", e)
            raise

        if row is None:
            raise UserNotFoundError()

        qry = (
            "select m.`id` from `ftp_mapping` m "
            "where m.`ftp_id` = ? and m.`system` = ? order by m.`id`"
        )
        try:
            folders = self.db.query(qry, row[0], self.login_system)
        except SQLAlchemyError as e:
            self._log_failure("lookup", e)
            raise

        return Account(
            id=row[0],
            username=row[1],
            description=row[2],
            password=row[3],
            folders=[folder[0] for folder in folders],
        )

    def get(self, account_id: int) -> Account:
        """
        Fetch an account by id, without its password.

        Raises:
            UserNotFoundError: If the id does not exist
        """
        self.db.ensure_live()

        qry = "select `id`, `username`, `description` from `ftp_account` where `id` = ?"
        try:
            row = self.db.query_row(qry, account_id)
        except SQLAlchemyError as e:
            self._log_failure("get", e)
            raise

        if row is None:
            raise UserNotFoundError()

        return Account(id=row[0], username=row[1], description=row[2])

    def list_paged(self, page: int = 0, page_size: int = 0, search: str = "") -> AccountCollection:
        """
        List accounts ordered by id, one page at a time.

        Args:
            page: 1-based page, 0 for the first page
            page_size: Accounts per page, 0 for the default of 30
            search: Optional substring of the username or description

        Returns:
            AccountCollection with the page's accounts and the totals for
            the whole (filtered) table. Passwords are never included.
        """
        self.db.ensure_live()

        request = PageRequest(page=page, page_size=page_size, search=search)
        try:
            result = self.paginator.paginate(
                ACCOUNT_TABLE, DISPLAY_COLUMNS, SEARCH_COLUMNS, request
            )
        except SQLAlchemyError as e:
            self._log_failure("list_paged", e)
            raise

        return AccountCollection(
            ftpusers=[
                Account(id=row[0], username=row[1], description=row[2])
                for row in result.rows
            ],
            total_items=result.total_items,
            total_pages=result.total_pages,
        )

    def create(self, account: Account) -> int:
        """
        Insert an account and return its new id.

        Raises:
            AccountExistsError: If the username is already taken
            AccountNotFoundError: If the new row is gone before its id is read
        """
        self.db.ensure_live()

        qry = "insert into `ftp_account` (`username`, `description`, `password`) values (?, ?, ?)"
        try:
            self.db.execute(qry, account.username, account.description, account.password)
        except SQLAlchemyError as e:
            if self.db.dialect.is_unique_violation(e):
                raise AccountExistsError() from e
            self._log_failure("create", e)
            raise

        # Not transactionally tied to the insert; min() picks the surviving row
        qry = "select min(`id`) from `ftp_account` where `username` = ?"
        try:
            row = self.db.query_row(qry, account.username)
        except SQLAlchemyError as e:
            self._log_failure("create", e)
            raise

        # NULL when the row was deleted again before this read
        if row is None or row[0] is None:
            raise AccountNotFoundError()

        return int(row[0])

    def update(self, account: Account) -> None:
        """
        Update username and description; the password is left alone.

        Raises:
            AccountNotFoundError: If the id does not exist
            AccountExistsError: If the new username belongs to another account
        """
        self.db.ensure_live()

        qry = (
            "update `ftp_account` set `username` = ?, `description` = ?, "
            "`updated_on` = current_timestamp where `id` = ?"
        )
        try:
            rows = self.db.execute(qry, account.username, account.description, account.id)
        except SQLAlchemyError as e:
            if self.db.dialect.is_unique_violation(e):
                raise AccountExistsError() from e
            self._log_failure("update", e)
            raise

        if rows == 0:
            raise AccountNotFoundError()

    def update_password(self, account: Account) -> None:
        """
        Replace the password of the account with this id.

        Raises:
            AccountNotFoundError: If the id does not exist
        """
        self.db.ensure_live()

        qry = "update `ftp_account` set `password` = ?, `updated_on` = current_timestamp where `id` = ?"
        try:
            rows = self.db.execute(qry, account.password, account.id)
        except SQLAlchemyError as e:
            self._log_failure("update_password", e)
            raise

        if rows == 0:
            raise AccountNotFoundError()

    def delete(self, account_id: int) -> None:
        """
        Delete an account; its mappings go with it.

        Raises:
            AccountNotFoundError: If the id does not exist
        """
        self.db.ensure_live()

        qry = "delete from `ftp_account` where `id` = ?"
        try:
            rows = self.db.execute(qry, account_id)
        except SQLAlchemyError as e:
            self._log_failure("delete", e)
            raise

        if rows == 0:
            raise AccountNotFoundError()
