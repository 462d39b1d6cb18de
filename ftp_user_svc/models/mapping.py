"""
ftp_mapping table: external system identifiers mapped to FTP accounts.
"""

from sqlalchemy import Column, ForeignKey, Integer, String

from ftp_user_svc.models.base import Base


class FtpMapping(Base):
    """
    Mapping of (system, id) to one FTP account.

    The composite key allows at most one account per external identifier.
    Deleting the account deletes its mappings.
    """

    __tablename__ = "ftp_mapping"

    system = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    ftp_id = Column(
        Integer,
        ForeignKey("ftp_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"FtpMapping(system={self.system!r}, id={self.id!r}, ftp_id={self.ftp_id!r})"
