# service/session_service.py
import logging
from collections import Counter
from typing import Iterable, List, Optional
from core.coordinator import StreamCoordinator
from core.mutation_gateway import ExternalMutationGateway
from core.reconciler import ClaimReconciler
from model.api import BadgeCount, ClaimSummaryResponse, SessionStateResponse
from model.claim import Claim, ClaimStatus, Verdict
from repository.preference_repository import JOB_ID, PreferenceRepository
from service.api_client import PaperTrailClient
from service.credential_service import CredentialStore
from util.enums import ErrorMessage
from util.errors import AppError
from util.presentation import UNVERIFIED_LABEL, status_badge, verdict_badge

log = logging.getLogger(__name__)


class SessionService:
    """
    Flow:
    - On api-key: validate with the backend, then keep it (optionally remembered).
    - On upload: send the paper, remember the job id, start streaming it.
    - On track/stop: drive the coordinator; claims stay readable at all times.
    - On verify/skip/suggest: patch one claim through the mutation gateway.
    - On startup: resume the remembered job with the remembered key.
    """

    def __init__(
        self,
        client: PaperTrailClient,
        preferences: PreferenceRepository,
        reconciler: Optional[ClaimReconciler] = None,
    ) -> None:
        self._client = client
        self._prefs = preferences
        self.reconciler = reconciler if reconciler is not None else ClaimReconciler()
        self.coordinator = StreamCoordinator(client, self.reconciler)
        self.gateway = ExternalMutationGateway(self.reconciler, client)
        self.credentials = CredentialStore(preferences)

    # ---------------- Credential ----------------

    async def set_api_key(self, api_key: str, remember: bool) -> None:
        res = await self._client.validate_key(api_key)
        if not res.ok:
            info = ErrorMessage.INVALID_API_KEY.value
            raise AppError(res.error or info.message, info.http_status)
        await self.credentials.set(api_key, remember)

    async def clear_api_key(self) -> None:
        await self.credentials.clear()
        self.coordinator.stop()

    # ---------------- Streaming ----------------

    async def upload(self, filename: str, data: bytes) -> str:
        api_key = self.credentials.require()
        job_id = await self._client.upload_paper(filename, data, api_key)
        log.info("Uploaded %s as job %s", filename, job_id)
        await self.track(job_id)
        return job_id

    async def track(self, job_id: str) -> None:
        self.coordinator.track(job_id, self.credentials.require())
        await self._prefs.set(JOB_ID, job_id)

    def stop(self) -> None:
        self.coordinator.stop()

    async def resume(self) -> Optional[str]:
        await self.credentials.init()
        job_id = await self._prefs.get(JOB_ID)
        if job_id and self.credentials.api_key:
            log.info("Resuming job %s", job_id)
            self.coordinator.track(job_id, self.credentials.api_key)
            return job_id
        return None

    def state(self) -> SessionStateResponse:
        c = self.coordinator
        progress = c.progress
        return SessionStateResponse(
            state=c.state,
            jobId=c.job_id,
            progress=progress,
            percent=progress.percent if progress else 0,
            done=c.done,
            error=c.error,
            decodeErrors=len(c.decode_errors),
            claimCount=len(self.reconciler),
            hasApiKey=self.credentials.api_key is not None,
        )

    # ---------------- Claims ----------------

    def claims(self) -> List[Claim]:
        return self.reconciler.snapshot()

    def seed(self, claims: Iterable[Claim]) -> List[Claim]:
        self.reconciler.seed_from(claims)
        return self.reconciler.snapshot()

    def summary(self) -> ClaimSummaryResponse:
        claims = self.reconciler.snapshot()
        statuses = Counter(c.status for c in claims)
        verdicts = Counter(c.verdict for c in claims if c.verdict is not None)
        unverified = len(claims) - sum(verdicts.values())
        by_verdict = {
            v.value: BadgeCount(label=verdict_badge(v).label, count=verdicts[v])
            for v in Verdict
        }
        by_verdict["none"] = BadgeCount(label=UNVERIFIED_LABEL, count=unverified)
        return ClaimSummaryResponse(
            total=len(claims),
            byStatus={
                s.value: BadgeCount(label=status_badge(s).label, count=statuses[s])
                for s in ClaimStatus
            },
            byVerdict=by_verdict,
            unverified=unverified,
        )

    async def verify(self, claim_id: str, filename: str, data: bytes) -> Claim:
        job_id = self.coordinator.job_id or await self._prefs.get(JOB_ID) or ""
        return await self.gateway.verify(
            job_id, claim_id, filename, data, self.credentials.require()
        )

    def skip(self, claim_id: str, reason: Optional[str] = None) -> Claim:
        return self.gateway.apply_skip(claim_id, reason)

    async def suggest(self, claim_id: str) -> Claim:
        return await self.gateway.fetch_suggestions(claim_id)

    async def aclose(self) -> None:
        self.coordinator.stop()
        await self._client.aclose()
