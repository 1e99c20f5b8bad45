"""
Body Transformers

Channel-specific mutations applied to the parsed JSON body before forwarding.
Each transformer mutates the body in place and returns it; the return value is
what gets forwarded.

- Claude: inject metadata.user_id
- Codex: strip timestamps from instructions/system input, inject prompt_cache_key
- Gemini: strip timestamps from systemInstruction
"""

import logging
import re
import secrets
from typing import Any

from cache_proxy.domain.request import TransformContext

claude_logger = logging.getLogger("cache_proxy.channels.claude")
codex_logger = logging.getLogger("cache_proxy.channels.codex")
gemini_logger = logging.getLogger("cache_proxy.channels.gemini")

TIMESTAMP_MARKER = "Current date and time:"

# At the very start of the text the line's own newline goes with it, so no blank
# first line is left behind; anywhere else the preceding newline is removed.
_TIMESTAMP_RE = re.compile(
    r"\A" + re.escape(TIMESTAMP_MARKER) + r"[^\n]*\n?"
    r"|\n?" + re.escape(TIMESTAMP_MARKER) + r"[^\n]*"
)

CACHE_KEY_PREFIX = "openclaw"


def strip_timestamp(text: Any) -> Any:
    """
    Remove "Current date and time: ..." lines from a prompt

    Matches e.g. "Current date and time: Monday, February 2, 2026 at 12:13:18 PM GMT+8".
    Non-string input is returned unchanged.

    Examples:
        >>> strip_timestamp("You are helpful.\\nCurrent date and time: Monday\\nBe brief.")
        'You are helpful.\\nBe brief.'
        >>> strip_timestamp("Current date and time: Monday\\nDo X")
        'Do X'
    """
    if not isinstance(text, str) or not text:
        return text
    return _TIMESTAMP_RE.sub("", text)


def _strip_and_log(text: str, field_name: str, logger: logging.Logger) -> tuple[str, bool]:
    before = len(text)
    stripped = strip_timestamp(text)
    if len(stripped) != before:
        logger.info("[CACHE] Removed timestamp from %s (%s -> %s)", field_name, before, len(stripped))
        return stripped, True
    return stripped, False


def inject_claude_metadata(body: dict[str, Any], ctx: TransformContext) -> dict[str, Any]:
    """
    Set metadata.user_id to the configured user identifier

    Sibling metadata keys are kept; a caller-provided user_id is always overwritten.
    """
    metadata = body.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    body["metadata"] = {**metadata, "user_id": ctx.settings.USER_ID}

    messages = body.get("messages")
    claude_logger.info(
        "[%s] model=%s, messages=%s",
        ctx.classified.channel,
        body.get("model"),
        len(messages) if isinstance(messages, list) else 0,
    )
    return body


def resolve_session_id(body: dict[str, Any], ctx: TransformContext) -> str:
    """
    Pick the session id used in a synthesized cache key

    Precedence: x-session-key header, metadata.session_id, user, "default".
    """
    metadata = body.get("metadata")
    session_from_metadata = metadata.get("session_id") if isinstance(metadata, dict) else None
    session_id = (
        ctx.header("x-session-key")
        or session_from_metadata
        or body.get("user")
        or "default"
    )
    return str(session_id)


def generate_cache_key(session_id: str) -> str:
    """
    Build a synthetic prompt cache key

    The 8 hex char suffix is best-effort deduplication, not a unique identity.
    """
    return f"{CACHE_KEY_PREFIX}-{session_id}-{secrets.token_hex(4)}"


def normalize_codex_body(body: dict[str, Any], ctx: TransformContext) -> dict[str, Any]:
    """
    Stabilize a Codex (Responses API) request for upstream prompt caching

    1. Strip timestamps from `instructions` and from system messages in `input`
    2. Inject `prompt_cache_key` if the caller did not send one
    """
    session_id = resolve_session_id(body, ctx)
    original_cache_key = body.get("prompt_cache_key")
    codex_logger.debug("Original prompt_cache_key: %s", original_cache_key or "none")

    timestamp_removed = False

    instructions = body.get("instructions")
    if isinstance(instructions, str) and instructions:
        body["instructions"], removed = _strip_and_log(instructions, "instructions", codex_logger)
        timestamp_removed = timestamp_removed or removed

    input_items = body.get("input")
    if isinstance(input_items, list):
        for item in input_items:
            if not isinstance(item, dict) or item.get("role") != "system":
                continue
            content = item.get("content")
            if isinstance(content, str):
                item["content"], removed = _strip_and_log(content, "system message", codex_logger)
                timestamp_removed = timestamp_removed or removed

    if timestamp_removed:
        codex_logger.info("[CACHE] Timestamp removed for stable caching")

    if not original_cache_key:
        body["prompt_cache_key"] = generate_cache_key(session_id)

    codex_logger.info(
        "[%s] model=%s, cache_key=%s, injected=%s",
        session_id,
        body.get("model"),
        body["prompt_cache_key"],
        not original_cache_key,
    )
    return body


def normalize_gemini_body(body: dict[str, Any], ctx: TransformContext) -> dict[str, Any]:
    """Strip timestamps from systemInstruction.parts[0].text"""
    timestamp_removed = False

    system_instruction = body.get("systemInstruction")
    parts = system_instruction.get("parts") if isinstance(system_instruction, dict) else None
    if isinstance(parts, list) and parts and isinstance(parts[0], dict):
        text = parts[0].get("text")
        if isinstance(text, str) and text:
            parts[0]["text"], timestamp_removed = _strip_and_log(text, "systemInstruction", gemini_logger)

    if timestamp_removed:
        gemini_logger.info("[CACHE] Timestamp removed for stable caching")

    contents = body.get("contents")
    gemini_logger.info(
        "contents=%s, timestampRemoved=%s",
        len(contents) if isinstance(contents, list) else 0,
        timestamp_removed,
    )
    return body


def passthrough_body(body: Any, ctx: TransformContext) -> Any:
    """Unknown channels are forwarded untouched"""
    return body
