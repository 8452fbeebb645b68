import pydantic
import pytest
from core.reconciler import ClaimReconciler, dedupe_suggestions
from model.claim import Claim, ClaimStatus, Evidence, Suggestion, Verdict


def _claim(cid: str, **kw) -> Claim:
    return Claim(id=cid, text=kw.pop("text", f"Claim {cid}"), status=kw.pop("status", "uncited"), **kw)


def test_same_id_is_last_write_wins():
    r = ClaimReconciler()
    r.apply_claim(_claim("c1"))
    r.apply_claim(_claim("c1", verdict="unsupported", confidence=0.2))
    snap = r.snapshot()
    assert len(snap) == 1
    assert snap[0].verdict == Verdict.unsupported
    assert snap[0].confidence == 0.2


def test_replacement_drops_stale_optional_fields():
    r = ClaimReconciler()
    r.apply_claim(_claim("c1", verdict="supported", reasoningMd="old"))
    r.apply_claim(_claim("c1"))
    assert r.get("c1").verdict is None
    assert r.get("c1").reasoningMd is None


def test_insertion_order_survives_replacement():
    r = ClaimReconciler()
    for cid in ("a", "b", "c"):
        r.apply_claim(_claim(cid))
    r.apply_claim(_claim("a", status="cited"))
    r.apply_external_replace(_claim("b", verdict="skipped"))
    assert [c.id for c in r.snapshot()] == ["a", "b", "c"]
    assert r.get("a").status == ClaimStatus.cited


def test_snapshot_is_a_copy():
    r = ClaimReconciler()
    r.apply_claim(_claim("a"))
    snap = r.snapshot()
    r.apply_claim(_claim("b"))
    assert [c.id for c in snap] == ["a"]
    assert r.snapshot() == r.snapshot()


def test_snapshot_claims_cannot_be_mutated():
    r = ClaimReconciler()
    r.apply_claim(
        _claim(
            "a",
            evidence=[Evidence(paperTitle="Src", page=1)],
            suggestions=[Suggestion(title="A", url="http://x")],
        )
    )
    snap = r.snapshot()
    with pytest.raises(AttributeError):
        snap[0].suggestions.append(Suggestion(title="B"))
    with pytest.raises(AttributeError):
        snap[0].evidence.clear()
    with pytest.raises(pydantic.ValidationError):
        snap[0].verdict = "supported"
    assert [s.title for s in r.get("a").suggestions] == ["A"]
    assert len(r.get("a").evidence) == 1
    assert r.get("a").verdict is None


def test_stale_generation_write_is_refused():
    r = ClaimReconciler()
    r.apply_claim(_claim("a"))
    seen = r.generation
    assert r.apply_external_replace(_claim("a", verdict="supported"), seen) is True

    r.reset()
    r.apply_claim(_claim("a"))
    assert r.apply_external_replace(_claim("a", verdict="skipped"), seen) is False
    assert r.get("a").verdict is None

    seen = r.generation
    r.seed_from([_claim("a")])
    assert r.apply_external_replace(_claim("a", verdict="skipped"), seen) is False
    assert r.apply_external_replace(_claim("a", verdict="skipped")) is True


def test_reset_and_seed_from():
    r = ClaimReconciler()
    r.apply_claim(_claim("x"))
    r.reset()
    assert len(r) == 0
    r.seed_from([_claim("b"), _claim("a"), _claim("b", status="cited")])
    assert [c.id for c in r.snapshot()] == ["b", "a"]
    assert r.get("b").status == ClaimStatus.cited
    assert "a" in r and "x" not in r
    r.apply_claim(_claim("z"))
    assert [c.id for c in r.snapshot()] == ["b", "a", "z"]


def test_dedupe_by_url_keeps_first():
    out = dedupe_suggestions(
        [
            Suggestion(title="A", url="http://x"),
            Suggestion(title="A-dup", url="http://x"),
            Suggestion(title="B", url="http://y"),
        ]
    )
    assert [s.title for s in out] == ["A", "B"]


def test_dedupe_without_url_uses_title_authors_year():
    out = dedupe_suggestions(
        [
            Suggestion(title="T", authors="Li", year=2020),
            Suggestion(title="T", authors="Li", year=2020, venue="ICLR"),
            Suggestion(title="T", authors="Li", year=2021),
        ]
    )
    assert [(s.year, s.venue) for s in out] == [(2020, None), (2021, None)]
