"""Tests for event-stream framing and folding a stream into one answer."""

import pytest

from codex_auth import EmptyStreamResultError
from responses_api import decode_event_stream, iter_data_payloads, parse_stream_event
from helpers import completed, delta, reply, sse


class TestDataPayloads:
    def test_yields_trimmed_data_lines(self):
        body = "event: response.created\ndata:  {\"a\": 1}  \n\n: keep-alive\n\ndata:{\"b\":2}\n\n"
        assert list(iter_data_payloads(body)) == ['{"a": 1}', '{"b":2}']

    def test_skips_done_and_empty_payloads(self):
        body = "data: [DONE]\n\ndata:\n\ndata:   \n\ndata: x\n\n"
        assert list(iter_data_payloads(body)) == ["x"]

    def test_crlf_blocks(self):
        body = "data: one\r\n\r\ndata: two\r\n\r\n"
        assert list(iter_data_payloads(body)) == ["one", "two"]

    def test_multiple_data_lines_in_one_block(self):
        assert list(iter_data_payloads("data: a\ndata: b\n\n")) == ["a", "b"]


class TestParseStreamEvent:
    def test_non_json_is_skipped(self):
        assert parse_stream_event("not json") is None

    def test_non_object_is_skipped(self):
        assert parse_stream_event("[1, 2]") is None

    def test_missing_type_is_skipped(self):
        assert parse_stream_event('{"delta": "x"}') is None

    def test_delta_event(self):
        event = parse_stream_event('{"type": "response.output_text.delta", "delta": "hi"}')
        assert event.type == "response.output_text.delta"
        assert event.delta == "hi"


class TestDecodeEventStream:
    def test_concatenates_deltas_in_order(self):
        body = sse([delta("Hel"), delta("lo"), delta(", world")])
        assert decode_event_stream(body) == "Hello, world"

    def test_deltas_win_over_completed(self):
        body = sse([delta("streamed"), completed(reply("snapshot"))])
        assert decode_event_stream(body) == "streamed"

    def test_later_deltas_replace_earlier_fallback(self):
        body = sse([completed(reply("snapshot")), delta("late")])
        assert decode_event_stream(body) == "late"

    def test_completed_fallback_without_deltas(self):
        body = sse([{"type": "response.created"}, completed(reply("snapshot"))])
        assert decode_event_stream(body) == "snapshot"

    def test_first_completed_fallback_wins(self):
        body = sse([completed(reply("first")), completed(reply("second"))])
        assert decode_event_stream(body) == "first"

    def test_completed_without_text_does_not_block_later_one(self):
        body = sse([completed({"output": []}), completed(reply("second"))])
        assert decode_event_stream(body) == "second"

    def test_malformed_frames_are_skipped(self):
        body = sse(["{not json", '"just a string"', {"no": "type"}, delta("ok")])
        assert decode_event_stream(body) == "ok"

    def test_unknown_events_are_ignored(self):
        body = sse([{"type": "response.in_progress"}, {"type": "response.output_item.added"}, delta("x")])
        assert decode_event_stream(body) == "x"

    def test_malformed_completed_response_is_ignored(self):
        body = sse([{"type": "response.completed", "response": {"output": "nope"}}, completed(reply("good"))])
        assert decode_event_stream(body) == "good"

    def test_done_before_end_is_not_terminal(self):
        body = "data: [DONE]\n\n" + sse([delta("after")], done=False)
        assert decode_event_stream(body) == "after"

    def test_no_text_raises_with_body(self):
        body = sse([{"type": "response.created"}, completed({"output": []})])
        with pytest.raises(EmptyStreamResultError) as exc_info:
            decode_event_stream(body)
        assert exc_info.value.body == body
        assert "No text found in streaming response" in str(exc_info.value)
        assert "--- raw body ---" in str(exc_info.value)

    def test_empty_body_raises(self):
        with pytest.raises(EmptyStreamResultError):
            decode_event_stream("")

    def test_empty_deltas_only_raises(self):
        with pytest.raises(EmptyStreamResultError):
            decode_event_stream(sse([delta(""), delta("")]))

    def test_done_only_stream_raises(self):
        with pytest.raises(EmptyStreamResultError):
            decode_event_stream("data: [DONE]\n\n")

    def test_completed_after_deltas_is_ignored(self):
        body = sse([delta("Hel"), delta("lo"), completed(reply("ignored"))])
        assert decode_event_stream(body) == "Hello"
