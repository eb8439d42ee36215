"""
Folds a Responses API event stream into a single answer.

Text deltas are the primary channel. Some stream variants emit no deltas and
only a final response.completed snapshot, so the first completed reply seen
while no delta has arrived is kept as a fallback.
"""
import json
import logging
from typing import Iterator, Optional

from pydantic import ValidationError

from codex_auth.errors import EmptyStreamResultError, NoOutputTextError
from .models import ResponsesReply, StreamEvent
from .response_decoder import extract_output_text
from .sse_parser import iter_data_payloads

logger = logging.getLogger(__name__)

OUTPUT_TEXT_DELTA = "response.output_text.delta"
RESPONSE_COMPLETED = "response.completed"


def parse_stream_event(data: str) -> Optional[StreamEvent]:
    """Decode one data: payload, or return None if it should be skipped.

    Payloads that are not JSON objects or carry no string ``type`` are
    skipped. A completed event whose embedded reply does not validate is
    kept with ``response=None``.
    """
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping non-JSON stream frame: {e}")
        return None

    if not isinstance(payload, dict):
        logger.debug("Skipping stream frame that is not a JSON object")
        return None

    kind = payload.get("type")
    if not isinstance(kind, str):
        logger.debug("Skipping stream frame without a type")
        return None

    delta = payload.get("delta")
    if not isinstance(delta, str):
        delta = None

    response = None
    raw_response = payload.get("response")
    if kind == RESPONSE_COMPLETED and isinstance(raw_response, dict):
        try:
            response = ResponsesReply.model_validate(raw_response)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed completed response: {e.error_count()} validation error(s)")

    return StreamEvent(type=kind, delta=delta, response=response)


def iter_stream_events(body: str) -> Iterator[StreamEvent]:
    """Yield every recognizable event in an event-stream body."""
    for data in iter_data_payloads(body):
        event = parse_stream_event(data)
        if event is not None:
            yield event


def decode_event_stream(body: str) -> str:
    """Decode a full event-stream body into the answer text.

    Args:
        body: Raw text/event-stream response body

    Returns:
        Concatenated deltas if any arrived, else the completed reply's text

    Raises:
        EmptyStreamResultError: neither source produced text (raw body attached)
    """
    collected = ""
    fallback: Optional[str] = None
    event_count = 0

    for event in iter_stream_events(body):
        event_count += 1

        if event.type == OUTPUT_TEXT_DELTA:
            if event.delta is not None:
                collected += event.delta

        elif event.type == RESPONSE_COMPLETED and not collected and not fallback:
            if event.response is None:
                continue
            try:
                fallback = extract_output_text(event.response)
            except NoOutputTextError:
                logger.debug("Completed event carried no output_text")

    if collected:
        return collected
    if fallback:
        logger.debug("No text deltas in stream, using response.completed snapshot")
        return fallback

    logger.error(f"No text found in event stream ({event_count} event(s) decoded)")
    raise EmptyStreamResultError(body)
