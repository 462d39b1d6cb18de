"""
Mapping repository.

Maps (system, id) pairs from external billing systems to FTP accounts.

Neither supported engine offers an upsert syntax the other accepts, so
``upsert`` inserts first and falls back to an update when the insert hits
the primary key. The two statements are not atomic: a concurrent delete
or upsert between them can make the reported outcome stale.
"""

from typing import Dict

from sqlalchemy.exc import SQLAlchemyError

from ftp_user_svc.core.database import ConnectionManager
from ftp_user_svc.core.dialect import ErrorKind
from ftp_user_svc.core.exceptions import MappingNotFoundError
from ftp_user_svc.core.logging_config import get_logger
from ftp_user_svc.schemas.account import Account
from ftp_user_svc.schemas.mapping import Mapping, MappingResult

logger = get_logger(__name__)


class MappingRepository:
    """
    Repository for ftp_mapping rows.

    Attributes:
        db: Shared connection manager
    """

    def __init__(self, db: ConnectionManager):
        self.db = db

    def _log_failure(self, operation: str, error: Exception, system: str) -> None:
        logger.error(
            f"{operation} failed: {error}",
            extra={"operation": operation, "dialect": self.db.dialect.name, "system": system},
        )

    def retrieve(self, system: str, system_id: str) -> Mapping:
        """
        Fetch a mapping together with its account (no password).

        Raises:
            MappingNotFoundError: If the pair is not mapped
        """
        self.db.ensure_live()

        qry = (
            "select a.`id`, a.`username`, a.`description` "
            "from `ftp_mapping` m "
            "inner join `ftp_account` a on m.`ftp_id` = a.`id` "
            "where m.`system` = ? and m.`id` = ?"
        )
        try:
            row = self.db.query_row(qry, system, system_id)
        except SQLAlchemyError as e:
            self._log_failure("retrieve_mapping", e, system)
            raise

        if row is None:
            raise MappingNotFoundError()

        return Mapping(
            system=system,
            id=system_id,
            ftp_account=Account(id=row[0], username=row[1], description=row[2]),
        )

    def delete(self, system: str, system_id: str) -> int:
        """
        Delete a mapping.

        Returns:
            Number of rows deleted; 0 when the pair was not mapped. Callers
            decide whether that is an error.
        """
        self.db.ensure_live()

        qry = "delete from `ftp_mapping` where `system` = ? and `id` = ?"
        try:
            return self.db.execute(qry, system, system_id)
        except SQLAlchemyError as e:
            self._log_failure("delete_mapping", e, system)
            raise

    def upsert(self, system: str, system_id: str, account_id: int) -> MappingResult:
        """
        Create the mapping, or point an existing one at account_id.

        Returns:
            INSERTED for a new pair, UPDATED for an existing one, or
            ACCOUNT_NOT_FOUND when the pair exists and account_id does not.

        Raises:
            SQLAlchemyError: Any failure that is not one of the outcomes
                above, unmodified. This includes inserting a new pair for
                an account that does not exist.
        """
        self.db.ensure_live()

        qry = "insert into `ftp_mapping` (`system`, `id`, `ftp_id`) values (?, ?, ?)"
        try:
            self.db.execute(qry, system, system_id, account_id)
            return MappingResult.INSERTED
        except SQLAlchemyError as e:
            if self.db.dialect.classify(e) is not ErrorKind.UNIQUE:
                self._log_failure("upsert_mapping", e, system)
                raise

        qry = "update `ftp_mapping` set `ftp_id` = ? where `system` = ? and `id` = ?"
        try:
            self.db.execute(qry, account_id, system, system_id)
        except SQLAlchemyError as e:
            if self.db.dialect.classify(e) is ErrorKind.FOREIGN_KEY:
                return MappingResult.ACCOUNT_NOT_FOUND
            self._log_failure("upsert_mapping", e, system)
            raise

        return MappingResult.UPDATED

    def system_directory(self, system: str) -> Dict[str, str]:
        """
        Map every external id under system to its account's username.

        Returns:
            Dict of external id -> username; empty if the system has no
            mappings.
        """
        self.db.ensure_live()

        qry = (
            "select distinct m.`id`, a.`username` "
            "from `ftp_mapping` m "
            "inner join `ftp_account` a on m.`ftp_id` = a.`id` "
            "where m.`system` = ?"
        )
        try:
            rows = self.db.query(qry, system)
        except SQLAlchemyError as e:
            self._log_failure("system_directory", e, system)
            raise

        return {row[0]: row[1] for row in rows}
