from .jsonl import JSONLinesDecoder, aiter_jsonl
from .params import ChatCompletionParams, build_request_body

__all__ = ["ChatCompletionParams", "JSONLinesDecoder", "aiter_jsonl", "build_request_body"]
