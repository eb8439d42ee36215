"""
Server-Sent Events (SSE) framing for buffered event-stream bodies.
"""
from typing import Iterator, List

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def split_blocks(body: str) -> List[str]:
    """Split an event-stream body into blank-line separated blocks."""
    # Normalize Windows-style endings so "\r\n\r\n" separates blocks too
    normalized = body.replace("\r\n", "\n")
    return normalized.split("\n\n")


def iter_data_payloads(body: str) -> Iterator[str]:
    """Yield the payload of every data: line, in order.

    Lines are trimmed before the prefix check and the payload is trimmed
    after the prefix is stripped. Empty payloads and the [DONE] sentinel
    are not yielded. event:, id: and comment lines are ignored.
    """
    for block in split_blocks(body):
        for line in block.split("\n"):
            line = line.strip()
            if not line.startswith(DATA_PREFIX):
                continue

            data = line[len(DATA_PREFIX):].strip()
            if not data or data == DONE_SENTINEL:
                continue

            yield data
