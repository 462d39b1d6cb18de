"""
Repository layer for data access.

Repositories share one ConnectionManager, hold no entity state between
calls and translate between wire models and ftp_account/ftp_mapping rows.
"""

from ftp_user_svc.repositories.account import AccountRepository
from ftp_user_svc.repositories.mapping import MappingRepository

__all__ = ["AccountRepository", "MappingRepository"]
