# core/ndjson.py
import codecs
import json
import logging
from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator, Dict, Final, List, Union
from pydantic import ValidationError
from model.api import StreamEvent, stream_event_adapter

log = logging.getLogger(__name__)

LINE_SEP: Final[str] = "\n"


@dataclass(frozen=True)
class MalformedLine:
    """A non-empty line that did not decode into a stream record."""

    line: str
    reason: str


Decoded = Union[StreamEvent, MalformedLine]


def ndjson_line(obj: Dict[str, object]) -> bytes:
    """
    Compact NDJSON serialization helper, the writer-side twin of NdjsonDecoder.
    """
    return (json.dumps(obj, separators=(",", ":")) + LINE_SEP).encode("utf-8")


def _parse_line(line: str) -> Decoded:
    try:
        return stream_event_adapter.validate_json(line)
    except ValidationError as e:
        first = e.errors()[0] if e.error_count() else {}
        loc = ".".join(str(x) for x in first.get("loc", ()))
        msg = first.get("msg", "invalid record")
        return MalformedLine(line=line, reason=f"{loc}: {msg}" if loc else msg)


class NdjsonDecoder:
    """
    Incremental newline-delimited JSON decoder.

    Bytes may arrive split anywhere (mid-line, mid UTF-8 sequence); feed() only
    emits records for complete lines and keeps the remainder buffered.
    """

    def __init__(self) -> None:
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes | str) -> List[Decoded]:
        if isinstance(chunk, (bytes, bytearray)):
            self._buffer += self._text.decode(bytes(chunk))
        else:
            self._buffer += chunk

        out: List[Decoded] = []
        while True:
            idx = self._buffer.find(LINE_SEP)
            if idx < 0:
                break
            line = self._buffer[:idx].strip()
            self._buffer = self._buffer[idx + 1 :]
            if not line:
                continue
            item = _parse_line(line)
            if isinstance(item, MalformedLine):
                log.warning("Malformed NDJSON line skipped: %s", item.reason)
            out.append(item)
        return out

    def flush(self) -> List[Decoded]:
        """
        Parse whatever is left without a trailing newline. A partial trailing
        write is expected, so a failure here is dropped rather than reported.
        """
        self._buffer += self._text.decode(b"", final=True)
        last = self._buffer.strip()
        self._buffer = ""
        if not last:
            return []
        item = _parse_line(last)
        if isinstance(item, MalformedLine):
            log.debug("Dropping trailing partial record: %s", item.reason)
            return []
        return [item]


async def decode_stream(chunks: AsyncIterable[bytes]) -> AsyncIterator[Decoded]:
    """Lazily decode a byte stream; each call owns its own decoder state."""
    decoder = NdjsonDecoder()
    async for chunk in chunks:
        for item in decoder.feed(chunk):
            yield item
    for item in decoder.flush():
        yield item
