"""
Datastore facade.

Bundles the connection manager and both repositories behind the eleven
operations the HTTP layer calls. Build it once at startup with
``Datastore.from_settings`` and share it between requests.
"""

from typing import Dict, Optional

from ftp_user_svc.core.config import Settings
from ftp_user_svc.core.database import ConnectionManager
from ftp_user_svc.core.logging_config import get_logger, setup_logging
from ftp_user_svc.repositories import AccountRepository, MappingRepository
from ftp_user_svc.repositories.account import DEFAULT_LOGIN_SYSTEM
from ftp_user_svc.schemas.account import Account, AccountCollection
from ftp_user_svc.schemas.mapping import Mapping, MappingResult, NewMapping

logger = get_logger(__name__)


class Datastore:
    """
    Entry point to the data layer.

    Attributes:
        db: Connection manager shared by the repositories
        accounts: ftp_account repository
        mappings: ftp_mapping repository
    """

    def __init__(self, db: ConnectionManager, login_system: str = DEFAULT_LOGIN_SYSTEM):
        self.db = db
        self.accounts = AccountRepository(db, login_system=login_system)
        self.mappings = MappingRepository(db)

    @classmethod
    def from_settings(cls, settings: Settings, **manager_options) -> "Datastore":
        """
        Resolve the dialect, connect and optionally create the schema.

        Args:
            settings: Application settings
            **manager_options: Passed to ConnectionManager (retry tuning, engine options)

        Raises:
            ConfigurationError: If the connection string is not supported
            DatabaseConnectionError: If no connection could be opened
        """
        db = ConnectionManager.from_data_source(settings.database_url, **manager_options)
        db.connect()

        if settings.create_schema:
            logger.info("Creating schema", extra={"dialect": db.dialect.name})
            db.create_schema()

        return cls(db, login_system=settings.login_system)

    def __enter__(self) -> "Datastore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.db.close()

    # FTP accounts

    def ftp_user_lookup(self, username: str) -> Account:
        return self.accounts.lookup(username)

    def ftp_user_get(self, account_id: int) -> Account:
        return self.accounts.get(account_id)

    def ftp_user_get_selection(
        self,
        page: int = 0,
        page_size: int = 0,
        search: Optional[str] = None,
    ) -> AccountCollection:
        return self.accounts.list_paged(page, page_size, search or "")

    def ftp_user_create(self, account: Account) -> int:
        return self.accounts.create(account)

    def ftp_user_update(self, account: Account) -> None:
        self.accounts.update(account)

    def ftp_user_update_password(self, account: Account) -> None:
        self.accounts.update_password(account)

    def ftp_user_delete(self, account_id: int) -> None:
        self.accounts.delete(account_id)

    # Mappings

    def mapping_retrieve(self, system: str, system_id: str) -> Mapping:
        return self.mappings.retrieve(system, system_id)

    def mapping_delete(self, system: str, system_id: str) -> int:
        return self.mappings.delete(system, system_id)

    def mapping_create(self, mapping: NewMapping) -> MappingResult:
        return self.mappings.upsert(mapping.system, mapping.system_id, mapping.ftp_account_id)

    def system_id_user_retrieve(self, system: str) -> Dict[str, str]:
        return self.mappings.system_directory(system)


def create_datastore(config: Optional[Settings] = None) -> Datastore:
    """
    Configure logging and open the datastore from settings.

    Args:
        config: Settings to use; the module-level settings when omitted

    Example:
        with create_datastore() as store:
            print(store.ftp_user_get_selection(page=1).total_items)
    """
    if config is None:
        from ftp_user_svc.core.config import settings as config

    setup_logging(level=config.log_level, json_format=config.log_json)
    return Datastore.from_settings(config)
