"""
Request-scoped trace files for the ChatGPT event stream.

When stream tracing is enabled, each session backend call gets one file under
the trace directory holding the request metadata, the response status and the
raw buffered SSE body, capped at a byte budget.
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Optional

TRUNCATION_MARKER = "[stream trace truncated]"


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def trace_path(base_dir: Path, route: str, request_id: str) -> Path:
    """File name for one trace: ``<utc timestamp>_<route>_<request id>.log``"""
    safe_route = route.replace(" ", "-").replace("/", "-")
    return base_dir / f"{_utc_now().strftime('%Y%m%dT%H%M%SZ')}_{safe_route}_{request_id}.log"


class StreamTracer:
    """Writes one session backend exchange to a trace file."""

    def __init__(self, request_id: str, route: str, base_dir: str, max_bytes: Optional[int]):
        self.request_id = request_id
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path = trace_path(self.base_dir, route, request_id)
        self._file = self.path.open("w", encoding="utf-8")

        # None means unbounded
        self._remaining = max_bytes if isinstance(max_bytes, int) and max_bytes > 0 else None
        self._truncated = False

        self.log_note(f"trace opened for request {request_id}")

    def __enter__(self) -> "StreamTracer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            self.log_error(f"{exc_type.__name__}: {exc}")
        self.close()

    def log_request(self, endpoint: str, model: str, session_id: str) -> None:
        self._write("REQUEST", f"POST {endpoint} model={model} session_id={session_id}")

    def log_status(self, status_code: int) -> None:
        self._write("STATUS", str(status_code))

    def log_body(self, body: str) -> None:
        """Record the raw event-stream body as received."""
        self._write("SSE", body)

    def log_note(self, note: str) -> None:
        self._write("NOTE", note)

    def log_error(self, message: str) -> None:
        self._write("ERROR", message)

    def close(self) -> None:
        if self._file.closed:
            return
        try:
            self.log_note("stream tracer closed")
        finally:
            self._file.close()

    def _write(self, label: str, payload: str) -> None:
        if self._file.closed or self._truncated:
            return

        entry = f"[{_utc_now().isoformat(timespec='milliseconds')}] [{label}] len={len(payload)}\n{payload}\n"
        if self._remaining is None:
            self._file.write(entry)
            self._file.flush()
            return

        encoded = entry.encode("utf-8", "replace")
        if len(encoded) <= self._remaining:
            self._file.write(entry)
            self._remaining -= len(encoded)
        else:
            # Cut on the byte budget, dropping any split multi-byte character
            self._file.write(encoded[:self._remaining].decode("utf-8", "ignore"))
            self._file.write(f"\n{TRUNCATION_MARKER}\n")
            self._remaining = 0
            self._truncated = True
        self._file.flush()


def maybe_create_stream_tracer(
    enabled: bool,
    request_id: str,
    route: str,
    base_dir: str,
    max_bytes: Optional[int],
) -> Optional[StreamTracer]:
    """Return a tracer when tracing is enabled, else None."""
    if not enabled:
        return None
    return StreamTracer(request_id=request_id, route=route, base_dir=base_dir, max_bytes=max_bytes)
