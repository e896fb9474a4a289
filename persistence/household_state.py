from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, Field, model_validator

DATA_FORMAT_VERSION = "1.0.0"
DEFAULT_BACKUP_COUNT = 10

ReviewType = Literal["Required", "Periodic"]
ReviewStatus = Literal["Scheduled", "Completed", "Overdue"]
Theme = Literal["light", "dark"]


class PersonRecord(BaseModel):
    name: str
    dob: str


class HouseholdRecord(BaseModel):
    id: int
    household_name: str
    persons: list[PersonRecord] = Field(default_factory=list)
    next_review_due: str
    review_type: ReviewType
    auc: float
    segment: str
    last_review_date: str | None = None
    review_status: ReviewStatus
    priority_flag: str
    assigned_month: str | None = None
    created: str
    updated: str


class AppSettingsRecord(BaseModel):
    last_file_path: str | None = None
    theme: Theme = "light"
    auto_backup: bool = True
    backup_count: int = Field(default=DEFAULT_BACKUP_COUNT, ge=0)


class HouseholdDataDoc(BaseModel):
    """
    Mirrors the on-disk data file schema:
      {
        "households": [ {...}, ... ],
        "settings": { "last_file_path": null, "theme": "light", "auto_backup": true, "backup_count": 10 },
        "version": "1.0.0"
      }
    """

    households: list[HouseholdRecord] = Field(default_factory=list)
    settings: AppSettingsRecord = Field(default_factory=AppSettingsRecord)
    version: str = DATA_FORMAT_VERSION

    @model_validator(mode="after")
    def _unique_household_ids(self) -> "HouseholdDataDoc":
        seen: set[int] = set()
        for household in self.households:
            if household.id in seen:
                raise ValueError(f"duplicate household id {household.id}")
            seen.add(household.id)
        return self

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "HouseholdDataDoc":
        return cls.model_validate(doc)

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


@dataclass(frozen=True)
class RawText:
    """Pre-formatted text (e.g. a CSV export) written to disk verbatim."""

    text: str


SavePayload = Union[HouseholdDataDoc, RawText]


def default_document() -> HouseholdDataDoc:
    return HouseholdDataDoc()
