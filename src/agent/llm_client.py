"""Chat-completion client for the hosted support model."""

from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from src.analytics.logger import logger
from src.utils.config import settings
from src.utils.retry import llm_retry

EMPTY_RESPONSE_MESSAGE = (
    "I apologize, but I encountered an issue generating a response. "
    "Please try again or contact our support team."
)


def connection_error_message() -> str:
    return (
        "I apologize, but I'm having trouble connecting right now. Please try again in a "
        f"moment or contact our support team at {settings.support_phone} for immediate assistance."
    )


class LLMClient:
    """Send one system prompt and one user message, get text back.

    Never raises: transport failures are retried, then answered with a
    fixed apology.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self._llm = llm

    @property
    def configured(self) -> bool:
        return self._llm is not None or bool(settings.llm_api_key)

    def _initialize_llm(self) -> BaseChatModel:
        if not settings.llm_api_key:
            raise ValueError("LLM_API_KEY is required to call the chat model")

        llm = ChatOpenAI(
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            top_p=settings.llm_top_p,
            frequency_penalty=settings.llm_frequency_penalty,
            presence_penalty=settings.llm_presence_penalty,
            timeout=settings.llm_timeout,
            max_retries=0,  # llm_retry owns retries
        )
        logger.info(f"Initialized chat model: {settings.llm_model}")
        return llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self._initialize_llm()
        return self._llm

    @llm_retry
    async def _invoke(self, system_prompt: str, user_message: str):
        return await self.llm.ainvoke(
            [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]
        )

    async def generate(self, system_prompt: str, user_message: str) -> str:
        """Model reply for the user message."""
        try:
            response = await self._invoke(system_prompt, user_message)
        except Exception as e:
            logger.error(f"Error calling chat model: {e}")
            return connection_error_message()

        content = response.content if isinstance(response.content, str) else ""
        return content.strip() or EMPTY_RESPONSE_MESSAGE
