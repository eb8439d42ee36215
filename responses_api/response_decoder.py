"""
Answer extraction from structured Responses API replies.
"""
import logging

from pydantic import ValidationError

from codex_auth.errors import NoOutputTextError, ResponseDecodeError
from .models import ResponsesReply

logger = logging.getLogger(__name__)

OUTPUT_TEXT = "output_text"


def extract_output_text(reply: ResponsesReply) -> str:
    """Return the text of the first output_text piece in document order.

    Shared by the non-streaming path and the stream decoder's
    response.completed fallback.

    Raises:
        NoOutputTextError: no output_text piece with text exists
    """
    for message in reply.output:
        for piece in message.content:
            if piece.type == OUTPUT_TEXT and piece.text is not None:
                return piece.text
    raise NoOutputTextError()


def parse_responses_reply(body: str) -> ResponsesReply:
    """Validate a raw JSON reply body.

    Raises:
        ResponseDecodeError: body is not JSON or not a Responses API reply
    """
    try:
        return ResponsesReply.model_validate_json(body)
    except ValidationError as e:
        logger.error(f"Failed to parse Responses API reply: {e}")
        raise ResponseDecodeError(f"Invalid Responses API reply: {e.error_count()} validation error(s)", body) from e


def decode_reply_body(body: str) -> str:
    """Parse a raw reply body and extract its answer text.

    The raw body is attached to NoOutputTextError for diagnosis.
    """
    reply = parse_responses_reply(body)
    try:
        return extract_output_text(reply)
    except NoOutputTextError as e:
        logger.error("Response carried no output_text")
        raise NoOutputTextError(body) from e

