"""
Core Data Models for Subscription Tracker

These models define the schema of everything that gets persisted.
They are designed to:
1. Round-trip losslessly through the stored JSON blob
2. Stay readable when newer versions add fields
3. Make "why is the list empty?" answerable after a load

DESIGN DECISION: Records are frozen. A subscription is created once by the
entry form and only ever removed afterwards, never edited in place.
"""

from datetime import date
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# SUBSCRIPTION RECORD
# =============================================================================

class Subscription(BaseModel):
    """
    One recurring subscription.

    Stored field names follow the persisted layout
    (`renewalDate`), while Python code uses `renewal_date`.
    Unknown fields in stored data are ignored so older builds can still
    read blobs written by newer ones.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Identity used for list rendering only"
    )
    name: str = Field(
        ...,
        description="Display name (empty is accepted)"
    )
    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount charged on each renewal"
    )
    renewal_date: date = Field(
        ...,
        alias="renewalDate",
        description="Next renewal date"
    )

    @field_validator("name")
    @classmethod
    def name_must_be_encodable(cls, v: str) -> str:
        """Lone surrogates cannot be written to the stored JSON."""
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("Name contains characters that cannot be stored")
        return v


# =============================================================================
# LOAD RESULT
# =============================================================================

class LoadStatus(str, Enum):
    """
    Why the loaded collection looks the way it does.

    The user sees an empty list for every status except LOADED with data;
    the distinction exists for logs and tests.
    """
    LOADED = "loaded"                # Blob found and decoded
    NOT_FOUND = "not_found"          # Nothing stored under the key yet
    CORRUPT = "corrupt"              # Blob present but not decodable
    STORAGE_ERROR = "storage_error"  # Backend failed while reading


class LoadResult(BaseModel):
    """Outcome of reading the subscription collection from storage."""

    status: LoadStatus
    subscriptions: list[Subscription] = Field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        """True when the collection is empty because something went wrong."""
        return self.status in (LoadStatus.CORRUPT, LoadStatus.STORAGE_ERROR)

    @property
    def count(self) -> int:
        return len(self.subscriptions)
