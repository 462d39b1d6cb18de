"""
SQLAlchemy table definitions.

Imported for their side effect of registering tables on ``Base.metadata``.
"""

from ftp_user_svc.models.base import Base
from ftp_user_svc.models.account import FtpAccount
from ftp_user_svc.models.mapping import FtpMapping

__all__ = ["Base", "FtpAccount", "FtpMapping"]
