"""Utility & helper functions."""

import json
import re
from typing import Any

import structlog
from langchain.chat_models import init_chat_model
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from core.config import settings
from core.exceptions import ConfigurationError, ResponseFormatError

logger = structlog.getLogger(__name__)

# Matches a whole payload wrapped in ```json ... ``` or ``` ... ```
FENCE_REGEX = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

EXCERPT_LENGTH = 50


def load_chat_model(fully_specified_name: str, **kwargs: Any) -> BaseChatModel:
    """Load a chat model from a fully specified name.

    Args:
        fully_specified_name (str): String in the format 'provider/model'.
        **kwargs: Additional parameters for the chat model (like temperature).

    Raises:
        ConfigurationError: If no Gemini API key is configured.
    """
    if not settings.GOOGLE_API_KEY:
        raise ConfigurationError(
            "Gemini API key is not configured. "
            "Please set the GOOGLE_API_KEY environment variable."
        )
    provider, model = fully_specified_name.split("/", maxsplit=1)
    return init_chat_model(
        model,
        model_provider=provider,
        google_api_key=settings.GOOGLE_API_KEY,
        **kwargs,
    )


def message_text(message: BaseMessage) -> str:
    """Flatten a chat model reply into plain text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def strip_code_fence(text: str) -> str:
    """Trim the payload and remove a surrounding markdown code fence, if any."""
    stripped = text.strip()
    match = FENCE_REGEX.match(stripped)
    if match and match.group(1):
        stripped = match.group(1).strip()
    return stripped


def parse_mindmap_json(text: str) -> dict:
    """
    Parse the model's reply into a raw mind map tree.

    Args:
        text: Raw reply text, optionally fenced

    Returns:
        The parsed JSON object

    Raises:
        ResponseFormatError: If the reply is not a JSON object
    """
    json_str = strip_code_fence(text)
    excerpt = json_str[:EXCERPT_LENGTH]

    if not json_str.startswith("{") or not json_str.endswith("}"):
        logger.error(
            f"Response from Gemini is not valid JSON format after trimming fences: {json_str}"
        )
        raise ResponseFormatError(
            "AI response was not in the expected JSON format. "
            f"The response started with: {excerpt}",
            excerpt=excerpt,
        )

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to decode Gemini response as JSON: {e}")
        raise ResponseFormatError(
            f"AI response could not be parsed as JSON ({e.msg}). "
            f"The response started with: {excerpt}",
            excerpt=excerpt,
        ) from e

    if not isinstance(parsed, dict):
        raise ResponseFormatError(
            "AI response was not a JSON object. "
            f"The response started with: {excerpt}",
            excerpt=excerpt,
        )
    return parsed
