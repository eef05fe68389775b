"""Shared parsing and LLM utilities for agent responses."""

import copy
import json
import sys
from dataclasses import dataclass

import httpx
import openai
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception


@dataclass(frozen=True)
class Parsed:
    """A structured reply that parsed cleanly."""

    value: dict
    degraded = False


@dataclass(frozen=True)
class Fallback:
    """A placeholder used because the reply could not be parsed.

    ``raw`` keeps the original reply text for diagnostics.
    """

    value: dict
    raw: str
    degraded = True


ParseResult = Parsed | Fallback


def parse_json_response(text: str, fallback: dict) -> ParseResult:
    """Extract the JSON object embedded in an LLM reply.

    Takes the span from the first '{' to the last '}' (inclusive) so that
    prose before or after the object is ignored, then parses it strictly.
    Never raises: anything unparseable yields a Fallback carrying a copy of
    the call site's fallback structure.
    """
    text = text if isinstance(text, str) else ""
    start = text.find("{")
    end = text.rfind("}")

    if start != -1 and end > start:
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return Parsed(data)

    return Fallback(value=copy.deepcopy(fallback), raw=text)


def report_fallback(label: str, result: ParseResult) -> None:
    """Print a warning and the raw reply when a parse fell back."""
    if not result.degraded:
        return
    print(
        f"[protoloop] Warning: failed to parse {label} JSON, using fallback.",
        file=sys.stderr,
    )
    print(f"[protoloop] Raw response: {result.raw}", file=sys.stderr)


_TRANSIENT_STATUS = (429, 500, 502, 503)


def _is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient HTTP/network error worth retrying."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.ConnectError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _TRANSIENT_STATUS
    # APITimeoutError is a subclass of APIConnectionError.
    if isinstance(exc, openai.APIConnectionError):
        return True
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code in _TRANSIENT_STATUS
    return False


def invoke_with_retry(llm, messages, max_retries: int = 0):
    """Call llm.invoke(messages), optionally retrying transient errors.

    With max_retries=0 (the shipped default) the call is made exactly once.
    Retries use exponential backoff on HTTP 429/500/502/503, connection
    errors, and timeouts. Non-transient errors (auth failures) are raised
    immediately.
    """

    @retry(
        stop=stop_after_attempt(max_retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(multiplier=1, min=2, max=16),
        retry=retry_if_exception(_is_transient),
        reraise=True,
        before_sleep=lambda state: print(
            f"[protoloop] Transient error: {state.outcome.exception()!r}. "
            f"Retrying in {state.next_action.sleep:.0f}s "
            f"(attempt {state.attempt_number}/{max_retries})...",
            file=sys.stderr,
        ),
    )
    def _invoke():
        return llm.invoke(messages)

    return _invoke()
