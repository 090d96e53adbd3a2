import logging

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from newsanalyzer.core.config import Settings


class TransportError(Exception):
    """The chat model could not be reached or returned nothing usable."""


def get_chat_llm(settings: Settings) -> ChatOpenAI:
    # One attempt per request; retries are left to the caller.
    return ChatOpenAI(
        model=settings.openai_model,
        api_key=settings.require_model_key(),
        temperature=0,
        timeout=settings.llm_request_timeout,
        max_retries=0,
    )


class ChatModelClient:
    """Turns a prompt string into the model's text reply."""

    def __init__(self, llm: BaseChatModel):
        self._llm = llm

    async def complete(self, prompt: str) -> str:
        try:
            message = await self._llm.ainvoke(prompt)
        except Exception as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        content = getattr(message, "content", None) if message is not None else None
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content
            )
        if not content or not content.strip():
            raise TransportError("No response received from AI service")

        logging.debug(f"Raw AI response: {content}")
        return content
