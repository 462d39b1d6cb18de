"""
FTP account wire models.

Field names match the service's JSON API. The password is accepted on
input but is never serialized.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


ERR_FTP_USER_REQUIRED = "Username, Description and Password are all required"
ERR_FTP_USER_UPDATE_REQ = "Username and Description are both required"
ERR_FTP_USER_PASSWORD_REQ = "Password is required"


def _blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class Account(BaseModel):
    """
    An FTP account.

    Attributes:
        id: Server-assigned identifier
        username: Unique login name
        description: Free text
        password: Write-only; populated only by the login lookup
        folders: External ids mapped to the account under the login system;
            populated only by the login lookup
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(default=None, ge=0)
    username: Optional[str] = None
    description: Optional[str] = None
    password: Optional[str] = Field(default=None, exclude=True, repr=False)
    folders: Optional[List[str]] = None

    def to_wire(self) -> dict:
        """JSON-ready dict with empty fields omitted."""
        return self.model_dump(exclude_none=True)


class AccountCreate(Account):
    """Body of a create request."""

    @model_validator(mode="after")
    def check_required(self) -> "AccountCreate":
        if _blank(self.username) or _blank(self.description) or _blank(self.password):
            raise ValueError(ERR_FTP_USER_REQUIRED)
        return self


class AccountUpdate(Account):
    """Body of an update request; the password is not changed."""

    @model_validator(mode="after")
    def check_required(self) -> "AccountUpdate":
        if _blank(self.username) or _blank(self.description):
            raise ValueError(ERR_FTP_USER_UPDATE_REQ)
        return self


class PasswordUpdate(Account):
    """Body of a password change request."""

    @model_validator(mode="after")
    def check_required(self) -> "PasswordUpdate":
        if _blank(self.password):
            raise ValueError(ERR_FTP_USER_PASSWORD_REQ)
        return self


class AccountCollection(BaseModel):
    """One page of accounts, ordered by id."""

    ftpusers: List[Account] = Field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0

    def to_wire(self) -> dict:
        return self.model_dump(exclude_none=True)
