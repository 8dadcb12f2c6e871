# tests/test_jsonl.py
"""
Tests for the incremental JSON Lines decoder.

Verifies:
  - Same records regardless of how the bytes are chunked.
  - Blank lines are skipped.
  - Trailing record without newline is yielded; trailing whitespace is not.
  - Malformed records abort decoding.
  - Multibyte UTF-8 characters split across chunks survive.
  - aiter_jsonl only reads as far as the consumer pulls.
"""

from __future__ import annotations

import json

import pytest

from dialtone.exceptions import StreamDecodeError
from dialtone.protocol.jsonl import JSONLinesDecoder, aiter_jsonl

RECORDS = [
    {"choices": [], "model": "m", "provider": "p"},
    {"choices": [{"delta": {"content": "line one\nline two"}}], "model": "m", "provider": "p"},
    {"choices": [{"delta": {"content": "héllo ✓ 🚀"}}], "model": "m", "provider": "p"},
    {
        "choices": [],
        "model": "m",
        "provider": "p",
        "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
    },
]
PAYLOAD = "\n".join(json.dumps(r, ensure_ascii=False) for r in RECORDS).encode() + b"\n"


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def decode_all(chunks: list[bytes]) -> list:
    decoder = JSONLinesDecoder()
    out = []
    for chunk in chunks:
        out.extend(decoder.feed(chunk))
    out.extend(decoder.flush())
    return out


async def agen(chunks: list[bytes]):
    for chunk in chunks:
        yield chunk


class TestFraming:
    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 16, 64, len(PAYLOAD)])
    def test_chunking_does_not_change_records(self, size):
        assert decode_all(split_every(PAYLOAD, size)) == RECORDS

    def test_uneven_chunks(self):
        cuts = [0, 4, 5, 60, 61, 140, len(PAYLOAD)]
        chunks = [PAYLOAD[a:b] for a, b in zip(cuts, cuts[1:])]
        assert decode_all(chunks) == RECORDS

    def test_escaped_newline_inside_string_is_not_a_split_point(self):
        records = decode_all([b'{"content": "a\\nb"}\n'])
        assert records == [{"content": "a\nb"}]

    def test_blank_lines_are_skipped(self):
        data = b'\n{"a": 1}\n\n   \n{"a": 2}\n\n'
        assert decode_all([data]) == [{"a": 1}, {"a": 2}]

    def test_incomplete_record_stays_buffered(self):
        decoder = JSONLinesDecoder()
        assert list(decoder.feed(b'{"a": 1}\n{"a"')) == [{"a": 1}]
        assert decoder.buffer == '{"a"'
        assert list(decoder.feed(b": 2}\n")) == [{"a": 2}]
        assert decoder.buffer == ""

    def test_multibyte_character_split_across_chunks(self):
        data = '{"c": "✓"}\n'.encode()
        mid = data.index("✓".encode()) + 1
        assert decode_all([data[:mid], data[mid:]]) == [{"c": "✓"}]


class TestTrailingData:
    def test_trailing_record_without_newline_is_yielded(self):
        assert decode_all([b'{"a": 1}\n{"a": 2}']) == [{"a": 1}, {"a": 2}]

    def test_trailing_whitespace_yields_nothing(self):
        assert decode_all([b'{"a": 1}\n  \t ']) == [{"a": 1}]

    def test_trailing_garbage_fails(self):
        decoder = JSONLinesDecoder()
        assert list(decoder.feed(b'{"a": 1}\n{"a": ')) == [{"a": 1}]
        with pytest.raises(StreamDecodeError) as exc_info:
            list(decoder.flush())
        assert exc_info.value.data == '{"a": '
        assert "remaining buffer" in str(exc_info.value)

    def test_empty_stream_yields_nothing(self):
        assert decode_all([]) == []


class TestMalformed:
    def test_malformed_line_raises(self):
        with pytest.raises(StreamDecodeError) as exc_info:
            decode_all([b'{"a": 1}\nnot json\n{"a": 2}\n'])
        assert exc_info.value.data == "not json"

    def test_records_before_bad_line_are_still_produced(self):
        decoder = JSONLinesDecoder()
        records = decoder.feed(b'{"a": 1}\nnot json\n')
        assert next(records) == {"a": 1}
        with pytest.raises(StreamDecodeError):
            next(records)

    def test_invalid_utf8_raises(self):
        with pytest.raises(StreamDecodeError):
            decode_all([b'{"a": "\xff"}\n'])


@pytest.mark.asyncio
class TestAsyncIteration:
    async def test_aiter_jsonl_yields_in_order(self):
        out = [r async for r in aiter_jsonl(agen(split_every(PAYLOAD, 9)))]
        assert out == RECORDS

    async def test_aiter_jsonl_is_pull_driven(self):
        pulled = []

        async def tracked():
            for i, chunk in enumerate([b'{"a": 1}\n', b'{"a": 2}\n', b'{"a": 3}\n']):
                pulled.append(i)
                yield chunk

        records = aiter_jsonl(tracked())
        assert await records.__anext__() == {"a": 1}
        assert pulled == [0]
        await records.aclose()

    async def test_aiter_jsonl_propagates_decode_error(self):
        with pytest.raises(StreamDecodeError):
            async for _ in aiter_jsonl(agen([b'{"a": 1}\n', b"{oops}\n"])):
                pass
