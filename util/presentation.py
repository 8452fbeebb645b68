# util/presentation.py
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Type
from model.claim import ClaimStatus, Verdict


@dataclass(frozen=True)
class Badge:
    label: str
    bg: str
    fg: str
    border: str


STATUS_BADGES: Mapping[ClaimStatus, Badge] = {
    ClaimStatus.cited: Badge("Cited", "#10321f", "#a8f0c7", "#1d6b43"),
    ClaimStatus.weakly_cited: Badge("Weakly cited", "#3a2f12", "#f2d08b", "#b58a2e"),
    ClaimStatus.uncited: Badge("Uncited", "#3a1414", "#f6a5a7", "#b03a40"),
}

VERDICT_BADGES: Mapping[Verdict, Badge] = {
    Verdict.supported: Badge("Verified", "#10321f", "#a8f0c7", "#1d6b43"),
    Verdict.partially_supported: Badge("Partially", "#1d2c49", "#b7cdf6", "#365792"),
    Verdict.unsupported: Badge("Unsupported", "#3a1414", "#f6a5a7", "#b03a40"),
    Verdict.skipped: Badge("Skipped", "#282d3a", "#c7cfdf", "#3a4256"),
}

UNVERIFIED_LABEL = "Unverified"


def ensure_exhaustive(table: Mapping[Enum, Badge], enum: Type[Enum]) -> None:
    missing = [m.value for m in enum if m not in table]
    if missing:
        raise RuntimeError(f"{enum.__name__} badges missing for: {', '.join(missing)}")


ensure_exhaustive(STATUS_BADGES, ClaimStatus)
ensure_exhaustive(VERDICT_BADGES, Verdict)


def status_badge(status: ClaimStatus) -> Badge:
    return STATUS_BADGES[status]


def verdict_badge(verdict: Verdict) -> Badge:
    return VERDICT_BADGES[verdict]
