from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

NOT_AVAILABLE = "N/A"
DESCRIPTION_UNAVAILABLE = "Description not available"


class JobSource(str, Enum):
    LINKEDIN = "LinkedIn"
    INDEED = "Indeed"
    NAUKRI = "Naukri"


def is_valid_title(title: Optional[str]) -> bool:
    if title is None:
        return False
    t = title.strip()
    return bool(t) and t != NOT_AVAILABLE


class JobRecord(BaseModel):
    title: str
    company: str = NOT_AVAILABLE
    location: str = NOT_AVAILABLE
    source: JobSource
    link: str
    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    description: str = ""  # filled once by the description enricher

    @field_validator("title")
    @classmethod
    def title_present(cls, v: str) -> str:
        if not is_valid_title(v):
            raise ValueError("title must be non-empty and not a placeholder")
        return v.strip()

    @field_validator("company", "location", mode="before")
    @classmethod
    def default_placeholder(cls, v):
        if v is None:
            return NOT_AVAILABLE
        v = str(v).strip()
        return v or NOT_AVAILABLE

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return (self.title.strip().lower(), self.company.strip().lower())

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


@dataclass
class AdapterResult:
    """Outcome of one source adapter; a failed adapter contributes no jobs."""
    source: JobSource
    jobs: List[JobRecord] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ScoredJob(BaseModel):
    job: JobRecord
    relevance_score: float
    commentary: Dict[str, Any] = Field(default_factory=dict)
    fallback: bool = False  # True when the scoring backend was unavailable

    @field_validator("relevance_score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        try:
            v = float(v)
        except (TypeError, ValueError):
            return 1.0
        return max(1.0, min(10.0, v))


class DeliveryResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
