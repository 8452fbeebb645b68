# core/mutation_gateway.py
import logging
from typing import Any, Dict, Iterable, Optional, Sequence
import pydantic
from core.reconciler import ClaimReconciler, dedupe_suggestions
from model.claim import Claim, Evidence, Suggestion, Verdict
from service.api_client import PaperTrailClient
from util.enums import ErrorMessage
from util.errors import UnknownClaim, ValidationError

log = logging.getLogger(__name__)

SKIP_REASON = "User chose to skip verification for this claim."


class ExternalMutationGateway:
    """
    Applies out-of-band results (verification, suggestions, skip) to claims.

    Each operation reads the claim fresh, builds a full replacement value,
    validates it as a Claim and writes it through the reconciler's external
    replace, the same path stream events use. Two concurrent patches for one
    claim may race; the last write wins.

    Network-backed operations remember the reconciler generation before the
    request. If the tracked job changed while the request was in flight, the
    result is dropped and the call fails with UnknownClaim.
    """

    def __init__(
        self, reconciler: ClaimReconciler, client: Optional[PaperTrailClient] = None
    ) -> None:
        self._reconciler = reconciler
        self._client = client

    def _current(self, claim_id: str) -> Claim:
        claim = self._reconciler.get(claim_id)
        if claim is None:
            raise UnknownClaim(claim_id)
        return claim

    def _replace(
        self,
        claim_id: str,
        update: Dict[str, Any],
        generation: Optional[int] = None,
    ) -> Claim:
        current = self._current(claim_id)
        try:
            new_claim = Claim.model_validate({**current.model_dump(), **update})
        except pydantic.ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(part) for part in err["loc"])
            raise ValidationError(f"Invalid {field} for claim {claim_id}: {err['msg']}") from e
        if not self._reconciler.apply_external_replace(new_claim, generation):
            log.info("Dropping result for claim %s: its job was replaced", claim_id)
            raise UnknownClaim(claim_id)
        return new_claim

    # ---------------- Patches ----------------

    def apply_verification(
        self,
        claim_id: str,
        verdict: Verdict,
        confidence: Optional[float],
        reasoning_md: Optional[str],
        evidence: Optional[Sequence[Evidence]] = None,
        *,
        source_uploaded: Optional[bool] = None,
        generation: Optional[int] = None,
    ) -> Claim:
        update: Dict[str, Any] = {
            "verdict": verdict,
            "confidence": confidence,
            "reasoningMd": reasoning_md,
        }
        if evidence is not None:
            update["evidence"] = tuple(evidence)
        if source_uploaded is not None:
            update["sourceUploaded"] = source_uploaded
        return self._replace(claim_id, update, generation)

    def apply_suggestions(
        self,
        claim_id: str,
        suggestions: Iterable[Suggestion],
        *,
        generation: Optional[int] = None,
    ) -> Claim:
        existing = self._current(claim_id).suggestions or ()
        merged = dedupe_suggestions([*existing, *suggestions])
        return self._replace(claim_id, {"suggestions": tuple(merged)}, generation)

    def apply_skip(self, claim_id: str, reason: Optional[str] = None) -> Claim:
        claim = self._current(claim_id)
        return self._replace(
            claim_id,
            {
                "verdict": Verdict.skipped,
                "reasoningMd": claim.reasoningMd or reason or SKIP_REASON,
            },
        )

    # ---------------- Network-backed ----------------

    def _require_client(self) -> PaperTrailClient:
        if self._client is None:
            raise RuntimeError("ExternalMutationGateway has no client configured")
        return self._client

    async def verify(
        self,
        job_id: str,
        claim_id: str,
        filename: str,
        data: bytes,
        credential: str,
    ) -> Claim:
        """
        Verify one claim against an uploaded source document and apply the
        result. Pre-flight checks run before any network call.
        """
        if not job_id or not job_id.strip():
            raise ValidationError(ErrorMessage.MISSING_JOB_ID.value.message)
        if not credential or not credential.strip():
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)
        if not data:
            raise ValidationError(ErrorMessage.MISSING_VERIFICATION_FILE.value.message)
        generation = self._reconciler.generation
        self._current(claim_id)

        res = await self._require_client().verify_claim(
            job_id, claim_id, filename, data, credential
        )
        log.info("Claim %s verified: %s", claim_id, res.verdict.value)
        return self.apply_verification(
            claim_id,
            res.verdict,
            res.confidence,
            res.reasoningMd,
            res.evidence,
            source_uploaded=True,
            generation=generation,
        )

    async def fetch_suggestions(self, claim_id: str) -> Claim:
        generation = self._reconciler.generation
        claim = self._current(claim_id)
        items = await self._require_client().suggest_citations(claim.text)
        return self.apply_suggestions(claim_id, items, generation=generation)
