"""
This module provides the mind map generation tool backed by Gemini.
"""
import structlog
from langchain_core.messages import SystemMessage, HumanMessage

from agents.agent.prompts import MINDMAP_PROMPT, MINDMAP_SYSTEM_PROMPT
from agents.agent.utils import load_chat_model, message_text, parse_mindmap_json
from core.config import settings
from core.exceptions import AIServiceError, InvalidApiKeyError

logger = structlog.getLogger(__name__)

INVALID_KEY_PHRASE = "API key not valid"


async def create_mindmap(topic: str) -> dict:
    """
    Ask the model for a mind map of a topic.

    Args:
        topic: Central topic, already validated and trimmed

    Returns:
        The raw tree as parsed from the model's JSON reply

    Raises:
        ConfigurationError: If the API key is missing (before any request)
        InvalidApiKeyError: If the service rejects the API key
        AIServiceError: If the call fails for any other reason
        ResponseFormatError: If the reply is not a JSON object
    """
    mindmap_prompt = MINDMAP_PROMPT.replace("{INSERT_TOPIC_HERE}", topic)
    agent = load_chat_model(
        settings.GEMINI_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        response_mime_type="application/json",
    )
    logger.info(f"Creating mindmap for {topic}")
    try:
        response = await agent.ainvoke(
            [
                SystemMessage(content=MINDMAP_SYSTEM_PROMPT),
                HumanMessage(content=mindmap_prompt),
            ]
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {e}")
        if INVALID_KEY_PHRASE in str(e):
            raise InvalidApiKeyError(
                "Invalid Gemini API Key. Please check your configuration."
            ) from e
        raise AIServiceError(f"Gemini API error: {e}") from e

    return parse_mindmap_json(message_text(response))
