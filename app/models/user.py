"""
Account model owned by the user directory.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from app.utils.timestamps import utcnow

USERS_COLLECTION = "user.user"


class DisplayNameChange(BaseModel):
    display_name: str
    changed_at: datetime


class User(BaseModel):
    """A game account; the token core only reads ``account_id`` and ``display_name``."""

    account_id: str
    display_name: str
    external_id: str = Field(..., description="Chat identity that owns the account.")
    banned: bool = False
    platform: str = "EpicPC"
    created: datetime = Field(default_factory=utcnow)
    last_login: datetime = Field(default_factory=utcnow)
    name_history: List[DisplayNameChange] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


__all__ = ["DisplayNameChange", "USERS_COLLECTION", "User"]
