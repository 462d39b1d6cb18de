"""
Mapping wire models and the upsert outcome.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ftp_user_svc.schemas.account import Account


ERR_FTP_MAPPING_REQUIRED = "System, SystemID and FTP_ID are all required"


class MappingResult(str, Enum):
    """
    Outcome of a mapping upsert.

    A failed upsert raises the underlying driver error instead of
    returning a value.
    """

    INSERTED = "inserted"
    UPDATED = "updated"
    ACCOUNT_NOT_FOUND = "account_not_found"


class Mapping(BaseModel):
    """A (system, id) pair and the account it maps to."""

    system: str
    id: str
    ftp_account: Account = Field(default_factory=Account)

    def to_wire(self) -> dict:
        return self.model_dump(exclude_none=True)


class NewMapping(BaseModel):
    """
    Body of a mapping create/update request.

    Wire names are ``id`` for the external identifier and ``ftp_id`` for
    the account.
    """

    model_config = ConfigDict(populate_by_name=True)

    system: str = ""
    system_id: str = Field(default="", alias="id")
    ftp_account_id: int = Field(default=0, alias="ftp_id", ge=0)

    @model_validator(mode="after")
    def check_required(self) -> "NewMapping":
        if not self.system or not self.system_id or self.ftp_account_id == 0:
            raise ValueError(ERR_FTP_MAPPING_REQUIRED)
        return self
