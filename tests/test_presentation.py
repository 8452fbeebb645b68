import pytest
from model.claim import ClaimStatus, Verdict
from util.presentation import (
    STATUS_BADGES,
    VERDICT_BADGES,
    Badge,
    ensure_exhaustive,
    status_badge,
    verdict_badge,
)


def test_tables_cover_every_member():
    assert set(STATUS_BADGES) == set(ClaimStatus)
    assert set(VERDICT_BADGES) == set(Verdict)


def test_lookups():
    assert status_badge(ClaimStatus.weakly_cited).label == "Weakly cited"
    assert verdict_badge(Verdict.supported).label == "Verified"
    assert verdict_badge(Verdict("skipped")).label == "Skipped"


def test_missing_member_is_rejected():
    partial = {ClaimStatus.cited: Badge("Cited", "", "", "")}
    with pytest.raises(RuntimeError, match="uncited"):
        ensure_exhaustive(partial, ClaimStatus)
