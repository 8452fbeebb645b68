# model/claim.py
from enum import Enum
from typing import Hashable
from pydantic import BaseModel, ConfigDict, Field


class ClaimStatus(str, Enum):
    cited = "cited"
    uncited = "uncited"
    weakly_cited = "weakly_cited"


class Verdict(str, Enum):
    supported = "supported"
    partially_supported = "partially_supported"
    unsupported = "unsupported"
    skipped = "skipped"


class Evidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    paperTitle: str | None = None
    page: int | None = None
    section: str | None = None
    paragraph: int | None = None
    excerpt: str | None = None


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str | None = None
    authors: str | None = None
    venue: str | None = None
    year: int | None = None

    @property
    def dedup_key(self) -> Hashable:
        """`url` when present, else (title, authors, year)."""
        if self.url:
            return self.url
        return (self.title, self.authors, self.year)


class Claim(BaseModel):
    """
    One extracted statement. Values are immutable, nested sequences included
    (tuples); build a validated replacement and hand it to the reconciler.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str
    status: ClaimStatus
    verdict: Verdict | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    reasoningMd: str | None = None
    evidence: tuple[Evidence, ...] | None = None
    suggestions: tuple[Suggestion, ...] | None = None
    sourceUploaded: bool = False
