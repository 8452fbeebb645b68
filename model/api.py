# model/api.py
from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, Field, TypeAdapter, model_validator
from model.claim import Claim, Evidence, Verdict
from model.job import StreamState

ProgressPhase = Literal["parse", "extract", "index", "verify"]


# ---------------- Stream records (NDJSON) ----------------


class ProgressPayload(BaseModel):
    phase: ProgressPhase
    processed: int = Field(ge=0)
    total: int = Field(ge=0)
    ts: int | None = None

    @model_validator(mode="after")
    def _processed_within_total(self) -> "ProgressPayload":
        if self.processed > self.total:
            raise ValueError("processed must not exceed total")
        return self

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return min(100, round(self.processed / self.total * 100))


class UpdatePayload(BaseModel):
    claimId: str
    patch: dict[str, Any] = Field(default_factory=dict)


class ErrorPayload(BaseModel):
    message: str = "Stream failed."


class ClaimEvent(BaseModel):
    type: Literal["claim"]
    payload: Claim


class UpdateEvent(BaseModel):
    type: Literal["update"]
    payload: UpdatePayload


class ProgressEvent(BaseModel):
    type: Literal["progress"]
    payload: ProgressPayload


class DoneEvent(BaseModel):
    type: Literal["done"]
    payload: dict[str, Any] = Field(default_factory=dict)


class ErrorEvent(BaseModel):
    type: Literal["error"]
    payload: ErrorPayload = Field(default_factory=ErrorPayload)


StreamEvent = Annotated[
    Union[ClaimEvent, UpdateEvent, ProgressEvent, DoneEvent, ErrorEvent],
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


# ---------------- Upstream responses ----------------


class ValidateKeyResponse(BaseModel):
    ok: bool


class UploadPaperResponse(BaseModel):
    jobId: str


class VerifyClaimResponse(BaseModel):
    claimId: str
    verdict: Verdict
    confidence: float
    reasoningMd: str
    evidence: list[Evidence] | None = None


# ---------------- Local session API ----------------


class ApiKeyRequest(BaseModel):
    apiKey: str = Field(min_length=1)
    remember: bool = False


class TrackRequest(BaseModel):
    jobId: str


class SkipClaimRequest(BaseModel):
    reason: str | None = None


class SessionStateResponse(BaseModel):
    state: StreamState
    jobId: str | None = None
    progress: ProgressPayload | None = None
    percent: int = 0
    done: bool = False
    error: str | None = None
    decodeErrors: int = 0
    claimCount: int = 0
    hasApiKey: bool = False


class BadgeCount(BaseModel):
    label: str
    count: int


class ClaimSummaryResponse(BaseModel):
    total: int
    byStatus: dict[str, BadgeCount]
    byVerdict: dict[str, BadgeCount]
    unverified: int
