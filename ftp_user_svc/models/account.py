"""
ftp_account table: one row per FTP credential.
"""

from sqlalchemy import Column, DateTime, Integer, String, func

from ftp_user_svc.models.base import Base


class FtpAccount(Base):
    """
    FTP account row.

    Attributes:
        id: Server-assigned identifier
        username: Login name, unique
        description: Free text shown to operators
        password: Credential checked at login; never selected on display paths
        updated_on: Refreshed by every update statement
    """

    __tablename__ = "ftp_account"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False)
    description = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)
    updated_on = Column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"FtpAccount(id={self.id!r}, username={self.username!r})"
