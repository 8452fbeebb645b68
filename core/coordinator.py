# core/coordinator.py
import logging
from typing import Callable, List, Optional
from core.reconciler import ClaimReconciler
from core.stream_session import StreamSession, open_stream
from model.api import (
    ClaimEvent,
    DoneEvent,
    ErrorEvent,
    ProgressEvent,
    ProgressPayload,
    StreamEvent,
    UpdateEvent,
)
from model.claim import Claim
from model.job import Job, JobStatus, StreamState
from service.api_client import PaperTrailClient
from util.enums import ErrorMessage
from util.errors import AppError, DecodeError, TransportError, UpstreamError, ValidationError

log = logging.getLogger(__name__)

Listener = Callable[["StreamCoordinator"], None]


class StreamCoordinator:
    """
    Tracks at most one job at a time and keeps three signals current:
    the claim set (held by the reconciler), the latest progress tick and the
    terminal signal (done flag or error).

    Flow:
      - track(J): same job -> ignored; otherwise cancel the old session, drop
        all state and stream J.
      - claim -> reconciler; progress -> replace tick and clear done;
        done -> done flag; error record / transport failure -> error signal.
        Claims already reconciled survive a failure; records arriving after
        it are ignored.
      - stop(): cancel and go idle, keeping claims for display.
    """

    def __init__(
        self,
        client: PaperTrailClient,
        reconciler: Optional[ClaimReconciler] = None,
    ) -> None:
        self._client = client
        self.reconciler = reconciler if reconciler is not None else ClaimReconciler()
        self._session: Optional[StreamSession] = None
        self._job_id: Optional[str] = None
        self._progress: Optional[ProgressPayload] = None
        self._done = False
        self._failure: Optional[AppError] = None
        self._decode_errors: List[DecodeError] = []
        self._listeners: List[Listener] = []

    # ---------------- Commands ----------------

    def track(self, job_id: str, credential: str) -> None:
        if not job_id or not job_id.strip():
            raise ValidationError(ErrorMessage.MISSING_JOB_ID.value.message)
        if not credential or not credential.strip():
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)

        if self._job_id == job_id:
            log.debug("Job %s already tracked; ignoring", job_id)
            return

        if self._session is not None:
            log.info("Switching from job %s to %s", self._job_id, job_id)
            self._session.cancel()
            self._session = None

        self.reconciler.reset()
        self._reset_signals()
        self._job_id = job_id

        session = open_stream(
            self._client,
            job_id,
            credential,
            on_event=lambda evt: self._on_event(session, evt),
            on_transport_error=lambda msg: self._on_transport_error(session, msg),
            on_decode_error=lambda err: self._on_decode_error(session, err),
        )
        session.add_done_callback(self._on_session_closed)
        self._session = session
        log.info("Streaming claims for job %s", job_id)
        self._notify()

    def stop(self) -> None:
        if self._session is None and self._job_id is None:
            return
        if self._session is not None:
            self._session.cancel()
            self._session = None
        log.info("Stopped tracking job %s", self._job_id)
        self._job_id = None
        self._notify()

    async def wait(self) -> None:
        """Wait for the active session to end (done, failed or cancelled)."""
        if self._session is not None:
            await self._session.wait()

    # ---------------- Observers ----------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                log.exception("Stream listener %r failed", listener)

    # ---------------- Signals ----------------

    @property
    def job_id(self) -> Optional[str]:
        return self._job_id

    @property
    def state(self) -> StreamState:
        if self._job_id is None:
            return StreamState.idle
        if self._failure is not None:
            return StreamState.errored
        if self._done:
            return StreamState.done
        return StreamState.streaming

    @property
    def progress(self) -> Optional[ProgressPayload]:
        return self._progress

    @property
    def done(self) -> bool:
        return self._done

    @property
    def failure(self) -> Optional[AppError]:
        return self._failure

    @property
    def error(self) -> Optional[str]:
        return self._failure.message if self._failure is not None else None

    @property
    def decode_errors(self) -> List[DecodeError]:
        return list(self._decode_errors)

    @property
    def job(self) -> Optional[Job]:
        if self._job_id is None:
            return None
        status: JobStatus = {
            StreamState.streaming: "streaming",
            StreamState.done: "done",
            StreamState.errored: "error",
        }[self.state]
        p = self._progress
        return Job(
            id=self._job_id,
            status=status,
            processed=p.processed if p else 0,
            total=p.total if p else 0,
        )

    def claims(self) -> List[Claim]:
        return self.reconciler.snapshot()

    def _reset_signals(self) -> None:
        self._progress = None
        self._done = False
        self._failure = None
        self._decode_errors = []

    # ---------------- Session callbacks ----------------

    def _is_active(self, session: StreamSession) -> bool:
        return session is self._session

    def _on_event(self, session: StreamSession, evt: StreamEvent) -> None:
        if not self._is_active(session):
            return
        if self._failure is not None:
            # the error is terminal for this job
            log.debug("Ignoring %s record after error for job %s", evt.type, session.job_id)
            return
        if isinstance(evt, ClaimEvent):
            self.reconciler.apply_claim(evt.payload)
        elif isinstance(evt, ProgressEvent):
            self._progress = evt.payload
            self._done = False
        elif isinstance(evt, DoneEvent):
            self._done = True
            log.info("Job %s finished streaming", session.job_id)
        elif isinstance(evt, ErrorEvent):
            self._failure = UpstreamError(evt.payload.message)
            log.warning("Job %s reported an error: %s", session.job_id, evt.payload.message)
        elif isinstance(evt, UpdateEvent):
            # decoded for wire compatibility, not applied
            log.debug("Ignoring update for claim %s", evt.payload.claimId)
            return
        self._notify()

    def _on_transport_error(self, session: StreamSession, message: str) -> None:
        if not self._is_active(session):
            return
        self._failure = TransportError(
            message or ErrorMessage.STREAM_ERROR.value.message
        )
        self._notify()

    def _on_decode_error(self, session: StreamSession, err: DecodeError) -> None:
        if not self._is_active(session):
            return
        self._decode_errors.append(err)
        self._notify()

    def _on_session_closed(self, session: StreamSession) -> None:
        if not self._is_active(session):
            return
        if self._failure is None and not self._done:
            log.warning("Stream for job %s closed without a done record", session.job_id)
            self._done = True
            self._notify()
