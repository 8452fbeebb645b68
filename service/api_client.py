# service/api_client.py
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional
import httpx
from pydantic import TypeAdapter
from config.settings import settings
from model.api import UploadPaperResponse, VerifyClaimResponse
from model.claim import Suggestion
from util.constants import ExternalURIs
from util.enums import ErrorMessage
from util.errors import TransportError, ValidationError
from util.functions import describe_exception, extract_error_message, join_url

log = logging.getLogger(__name__)

_suggestions_adapter = TypeAdapter(List[Suggestion])


@dataclass(frozen=True)
class ValidateResult:
    ok: bool
    status: int
    error: Optional[str] = None


class PaperTrailClient:
    """
    Client for the PaperTrail backend.

    - The API key travels in the request body (JSON or form), never in headers.
    - Plain calls share one timeout; the claim stream has no read timeout so a
      slow extraction is never cut off here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base = join_url(
            base_url or settings.API_BASE_URL,
            api_version if api_version is not None else settings.API_VERSION,
        )
        self._timeout = httpx.Timeout(
            timeout or settings.HTTP_TIMEOUT_SECONDS,
            connect=settings.CONNECT_TIMEOUT_SECONDS,
        )
        self._stream_timeout = httpx.Timeout(
            timeout or settings.HTTP_TIMEOUT_SECONDS,
            connect=settings.CONNECT_TIMEOUT_SECONDS,
            read=None,
        )
        self._http = httpx.AsyncClient(timeout=self._timeout, transport=transport)

    def _url(self, path: str) -> str:
        return join_url(self._base, path)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _post(self, path: str, failure: ErrorMessage, **kwargs) -> httpx.Response:
        try:
            res = await self._http.post(self._url(path), **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(
                describe_exception(e, ErrorMessage.NETWORK_ERROR.value.message),
                ErrorMessage.NETWORK_ERROR.value.http_status,
            ) from e
        if not res.is_success:
            message = extract_error_message(res) or failure.value.message
            log.info("POST %s failed: %s %s", path, res.status_code, message)
            raise TransportError(message, failure.value.http_status)
        return res

    # ---------------- Calls ----------------

    async def validate_key(self, api_key: str) -> ValidateResult:
        key = api_key.strip()
        if not key:
            return ValidateResult(ok=False, status=0, error="Empty API key.")
        try:
            res = await self._http.post(
                self._url(ExternalURIs.VALIDATE_API_KEY), json={"apiKey": key}
            )
        except httpx.HTTPError as e:
            return ValidateResult(
                ok=False,
                status=0,
                error=describe_exception(e, ErrorMessage.NETWORK_ERROR.value.message),
            )
        if res.is_success:
            return ValidateResult(ok=True, status=res.status_code)
        return ValidateResult(
            ok=False,
            status=res.status_code,
            error=extract_error_message(res) or ErrorMessage.INVALID_API_KEY.value.message,
        )

    async def upload_paper(self, filename: str, data: bytes, api_key: str) -> str:
        if not data:
            raise ValidationError(ErrorMessage.MISSING_FILE.value.message)
        if not api_key or not api_key.strip():
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)

        res = await self._post(
            ExternalURIs.UPLOAD_PAPER,
            ErrorMessage.UPLOAD_FAILED,
            files={"file": (filename or "paper.pdf", data, "application/pdf")},
            data={"apiKey": api_key},
        )
        return UploadPaperResponse.model_validate(res.json()).jobId

    @asynccontextmanager
    async def stream_claims(
        self, job_id: str, api_key: str
    ) -> AsyncIterator[httpx.Response]:
        """
        Open the NDJSON claim stream. Yields once headers are in; the body is
        read by the caller with `aiter_bytes()`. Status is not checked here.
        """
        request = self._http.build_request(
            "POST",
            self._url(ExternalURIs.STREAM_CLAIM),
            json={"jobId": job_id, "apiKey": api_key},
            headers={"accept": "application/x-ndjson"},
            timeout=self._stream_timeout,
        )
        response = await self._http.send(request, stream=True)
        try:
            yield response
        finally:
            await response.aclose()

    async def verify_claim(
        self, job_id: str, claim_id: str, filename: str, data: bytes, api_key: str
    ) -> VerifyClaimResponse:
        if not job_id or not job_id.strip():
            raise ValidationError(ErrorMessage.MISSING_JOB_ID.value.message)
        if not claim_id or not claim_id.strip():
            raise ValidationError(ErrorMessage.MISSING_CLAIM_ID.value.message)
        if not data:
            raise ValidationError(ErrorMessage.MISSING_VERIFICATION_FILE.value.message)
        if not api_key or not api_key.strip():
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)

        res = await self._post(
            ExternalURIs.VERIFY_CLAIM,
            ErrorMessage.VERIFY_FAILED,
            files={"file": (filename or "source.pdf", data, "application/pdf")},
            data={"jobId": job_id, "claimId": claim_id, "apiKey": api_key},
        )
        return VerifyClaimResponse.model_validate(res.json())

    async def suggest_citations(self, text: str) -> List[Suggestion]:
        key = (text or "").strip()
        if not key:
            return []
        res = await self._post(
            ExternalURIs.SUGGEST_CITATIONS,
            ErrorMessage.SUGGESTIONS_FAILED,
            json={"text": key},
        )
        body = res.json()
        if isinstance(body, dict):
            body = body.get("suggestions") or []
        return _suggestions_adapter.validate_python(body)
