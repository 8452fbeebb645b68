# core/stream_session.py
import asyncio
import logging
from typing import Callable, List, Optional
import httpx
from core.ndjson import MalformedLine, decode_stream
from model.api import StreamEvent
from service.api_client import PaperTrailClient
from util.enums import ErrorMessage
from util.errors import DecodeError
from util.functions import describe_exception, extract_error_message

log = logging.getLogger(__name__)

EventHandler = Callable[[StreamEvent], None]
ErrorHandler = Callable[[str], None]
DecodeErrorHandler = Callable[[DecodeError], None]

_NO_BODY_STATUSES = frozenset({204, 205})


class StreamSession:
    """
    One subscription to the claim stream of one job.

    Callbacks run on the event loop, in arrival order. After cancel() nothing
    else is delivered, including a read that was already in flight. The
    transport error callback fires at most once and never for cancellation.
    """

    def __init__(
        self,
        client: PaperTrailClient,
        job_id: str,
        credential: str,
        on_event: EventHandler,
        on_transport_error: ErrorHandler,
        on_decode_error: Optional[DecodeErrorHandler] = None,
    ) -> None:
        self.job_id = job_id
        self._client = client
        self._credential = credential
        self._on_event = on_event
        self._on_transport_error = on_transport_error
        self._on_decode_error = on_decode_error
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False
        self._failed = False
        self._done_callbacks: List[Callable[["StreamSession"], None]] = []

    # ---------------- Lifecycle ----------------

    def start(self) -> "StreamSession":
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(
                self._run(), name=f"claim-stream:{self.job_id}"
            )
            self._task.add_done_callback(self._finished_cb)
        return self

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            log.debug("Stream for job %s cancelled", self.job_id)

    async def wait(self) -> None:
        if self._task is not None:
            await asyncio.wait({self._task})

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def failed(self) -> bool:
        return self._failed

    def add_done_callback(self, fn: Callable[["StreamSession"], None]) -> None:
        """fn(session) runs once the session ends, unless it was cancelled."""
        if self.finished:
            if not self._cancelled:
                fn(self)
            return
        self._done_callbacks.append(fn)

    def _finished_cb(self, _task: asyncio.Task) -> None:
        if self._cancelled:
            return
        for fn in self._done_callbacks:
            fn(self)

    # ---------------- Delivery ----------------

    def _emit(self, event: StreamEvent) -> None:
        if not self._cancelled and not self._failed:
            self._on_event(event)

    def _fail(self, message: str) -> None:
        if self._cancelled or self._failed:
            return
        self._failed = True
        log.warning("Stream for job %s failed: %s", self.job_id, message)
        self._on_transport_error(message)

    def _malformed(self, item: MalformedLine) -> None:
        if self._cancelled or self._on_decode_error is None:
            return
        self._on_decode_error(
            DecodeError(ErrorMessage.MALFORMED_LINE.value.message, line=item.line)
        )

    async def _run(self) -> None:
        try:
            async with self._client.stream_claims(
                self.job_id, self._credential
            ) as res:
                if self._cancelled:
                    return
                if not res.is_success:
                    await res.aread()
                    self._fail(
                        extract_error_message(res)
                        or ErrorMessage.STREAM_FAILED.value.message
                    )
                    return
                if (
                    res.status_code in _NO_BODY_STATUSES
                    or res.headers.get("content-length") == "0"
                ):
                    self._fail(ErrorMessage.NO_RESPONSE_BODY.value.message)
                    return

                async for item in decode_stream(res.aiter_bytes()):
                    if self._cancelled or self._failed:
                        return
                    if isinstance(item, MalformedLine):
                        self._malformed(item)
                    else:
                        self._emit(item)
        except asyncio.CancelledError:
            if self._cancelled:
                return
            raise
        except (httpx.HTTPError, httpx.StreamError) as e:
            self._fail(describe_exception(e, ErrorMessage.NETWORK_ERROR.value.message))
        except Exception as e:
            log.exception("Unexpected failure while reading job %s", self.job_id)
            self._fail(describe_exception(e, ErrorMessage.STREAM_ERROR.value.message))


def open_stream(
    client: PaperTrailClient,
    job_id: str,
    credential: str,
    on_event: EventHandler,
    on_transport_error: ErrorHandler,
    *,
    on_decode_error: Optional[DecodeErrorHandler] = None,
) -> StreamSession:
    """Start streaming on the running loop; the returned session is the cancel handle."""
    return StreamSession(
        client,
        job_id,
        credential,
        on_event,
        on_transport_error,
        on_decode_error,
    ).start()
