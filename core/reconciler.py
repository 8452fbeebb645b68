# core/reconciler.py
import threading
from typing import Dict, Hashable, Iterable, List, Optional
from model.claim import Claim, Suggestion


def dedupe_suggestions(suggestions: Iterable[Suggestion]) -> List[Suggestion]:
    """
    Keep the first suggestion per key (url, else title/authors/year), in order
    of first appearance.
    """
    seen: set[Hashable] = set()
    out: List[Suggestion] = []
    for s in suggestions:
        key = s.dedup_key
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


class ClaimReconciler:
    """
    Authoritative id -> Claim collection.

    Every write is a whole-value replace keyed by id, so stream events and
    external patches can interleave without field-level races. A replaced claim
    keeps its first-seen position. Readers get copies, never the live dict.

    `generation` changes whenever the whole collection is swapped (reset or
    seed). A writer that read a claim before an await passes the generation it
    saw; the write is refused if the collection was swapped in between.
    """

    def __init__(self) -> None:
        self._claims: Dict[str, Claim] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def _replace(self, claim: Claim, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._claims[claim.id] = claim
            return True

    def apply_claim(self, claim: Claim) -> None:
        self._replace(claim)

    def apply_external_replace(
        self, claim: Claim, generation: Optional[int] = None
    ) -> bool:
        return self._replace(claim, generation)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self, claim_id: str) -> Optional[Claim]:
        with self._lock:
            return self._claims.get(claim_id)

    def snapshot(self) -> List[Claim]:
        with self._lock:
            return list(self._claims.values())

    def reset(self) -> None:
        with self._lock:
            self._claims = {}
            self._generation += 1

    def seed_from(self, claims: Iterable[Claim]) -> None:
        fresh: Dict[str, Claim] = {}
        for c in claims:
            fresh[c.id] = c
        with self._lock:
            self._claims = fresh
            self._generation += 1

    def __contains__(self, claim_id: object) -> bool:
        with self._lock:
            return claim_id in self._claims

    def __len__(self) -> int:
        with self._lock:
            return len(self._claims)
