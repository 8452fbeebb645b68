# util/functions.py
from typing import Any

import httpx


def join_url(*parts: str) -> str:
    """
    Join URL fragments with exactly one slash between them.
    The first part keeps its scheme/host; empty parts are dropped.
    """
    out: list[str] = []
    for i, p in enumerate(x for x in parts if x):
        out.append(p.rstrip("/") if i == 0 else p.strip("/"))
    return "/".join(out)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def extract_error_message(response: httpx.Response) -> str:
    """
    Best-effort human message from an error response.

    The backend may send:
      - {"ok": false, "error": "file_too_large", "maxMb": 10}
      - {"ok": false, "error": "rate_limited", "message": "Too many requests."}
      - {"detail": {...}} (HTTPException)
      - {"detail": "..."}
    Anything else falls back to "<status> <reason>".
    The response body must already be read.
    """
    body = _json_or_none(response)
    retry_after = response.headers.get("Retry-After")

    if isinstance(body, dict):
        detail = body.get("detail")
        d: Any = detail if detail is not None else body

        if isinstance(d, str) and d:
            return d

        if isinstance(d, dict):
            error = d.get("error")
            message = d.get("message")

            if error == "file_too_large":
                max_mb = d.get("maxMb")
                mb = max_mb if isinstance(max_mb, (int, float)) else 10
                return f"File exceeds {mb} MB."

            if error == "rate_limited":
                tail = f" Try again in {retry_after}s." if retry_after else ""
                return str(message) if message else f"Too many requests.{tail}"

            if message:
                return str(message)
            if error:
                return str(error)

    return f"{response.status_code} {response.reason_phrase}".strip()


def describe_exception(exc: BaseException, fallback: str) -> str:
    text = str(exc).strip()
    return text or f"{fallback} ({exc.__class__.__name__})"
