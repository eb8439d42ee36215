"""
Responses API wire format: request models, reply decoding and event-stream decoding.
"""
from .models import (
    InputContent,
    InputMessage,
    ChatRequest,
    OutputContent,
    OutputMessage,
    ResponsesReply,
    StreamEvent,
)
from .request_builder import BUNDLED_INSTRUCTIONS_FILE, build_chat_request, load_codex_instructions
from .response_decoder import decode_reply_body, extract_output_text, parse_responses_reply
from .sse_parser import iter_data_payloads, split_blocks
from .stream_decoder import decode_event_stream, iter_stream_events, parse_stream_event

__all__ = [
    # Models
    "InputContent",
    "InputMessage",
    "ChatRequest",
    "OutputContent",
    "OutputMessage",
    "ResponsesReply",
    "StreamEvent",
    # Requests
    "BUNDLED_INSTRUCTIONS_FILE",
    "build_chat_request",
    "load_codex_instructions",
    # Replies
    "decode_reply_body",
    "extract_output_text",
    "parse_responses_reply",
    # Event streams
    "iter_data_payloads",
    "split_blocks",
    "decode_event_stream",
    "iter_stream_events",
    "parse_stream_event",
]
