"""
Pydantic schemas passed between the organizer stages.

TrackMetadata is what the metadata reader hands to the planner, Plan is the
planner's answer for one file, and FileOutcome/BatchResult are what the
execution policy returns to the reporter.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrackMetadata(BaseModel):
    """Tag fields read from one audio file."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = Field(default=None, description="Track title")
    performers: List[str] = Field(default_factory=list, description="Performing artists, in tag order")
    album: Optional[str] = Field(default=None, description="Album title")
    year: Optional[int] = Field(default=None, description="Release year")
    track_number: Optional[int] = Field(default=None, description="Track number on the disc")
    disc_number: Optional[int] = Field(default=None, description="Disc number in the release")
    file_stem: str = Field(default="", description="Source filename without extension")

    @field_validator('year', 'track_number', 'disc_number', mode='before')
    @classmethod
    def positive_or_none(cls, v):
        """Handle empty strings and non-positive numbers as missing."""
        if v is None or v == "":
            return None
        try:
            v = int(v)
        except (ValueError, TypeError):
            return None
        return v if v > 0 else None

    @field_validator('performers', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v


class Plan(BaseModel):
    """Planned destination for one source file."""

    model_config = ConfigDict(frozen=True)

    abs_target: Path = Field(..., description="Absolute target path under the destination root")
    relative_target: str = Field(..., description="Target path relative to the destination root")


class OutcomeStatus(str, Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"
    ERRORED = "errored"


class FileOutcome(BaseModel):
    """Result of running one source file through the execution policy."""

    source_path: Path
    status: OutcomeStatus
    plan: Optional[Plan] = None
    final_target: Optional[Path] = Field(
        default=None,
        description="Path actually written, after collision resolution (None under dry-run)"
    )
    error_message: Optional[str] = None

    @property
    def relative_target(self) -> Optional[str]:
        return self.plan.relative_target if self.plan else None


class BatchResult(BaseModel):
    """Aggregate result of one organizer run."""

    processed: int = 0
    skipped: int = 0
    errors: int = 0
    outcomes: List[FileOutcome] = Field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.processed + self.skipped + self.errors

    @property
    def success(self) -> bool:
        """True when no file ended in the errored state."""
        return self.errors == 0

    def record(self, outcome: FileOutcome):
        self.outcomes.append(outcome)
        if outcome.status is OutcomeStatus.PROCESSED:
            self.processed += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1
