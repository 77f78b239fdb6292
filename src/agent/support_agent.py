"""Customer support agent orchestrator.

Builds the system prompt for one customer message from three sources
(reference documents through the context cache, matched catalog products,
and the customer's prior turns), calls the chat model and stores both sides
of the exchange.
"""

import asyncio
from typing import Any, Dict, Optional

from src.agent.llm_client import LLMClient
from src.agent.prompting import generate_system_prompt
from src.analytics.logger import logger
from src.context.context_cache import CacheState, ContextCache, ContextLoader
from src.context.document_loader import ContextFileLoader
from src.matching.product_matcher import ProductMatcher
from src.memory.chat_memory import format_chat_history_for_ai
from src.memory.conversation_store import ConversationStore, conversation_store
from src.memory.user_manager import UserManager, user_manager
from src.utils.config import settings

WARM_UP_QUERIES = (
    "car for 3 year old",
    "educational toys",
    "bike for boys",
    "doll for girls",
    "musical toys",
)


class SupportAgentError(Exception):
    """A chat request could not be completed."""


class UserResolutionError(SupportAgentError):
    pass


class ContextUnavailableError(SupportAgentError):
    pass


class MessagePersistenceError(SupportAgentError):
    pass


class SupportAgent:
    """Answer a customer message with context, products and memory."""

    def __init__(
        self,
        context_cache: ContextCache,
        product_matcher: ProductMatcher,
        loader: Optional[ContextLoader] = None,
        llm_client: Optional[LLMClient] = None,
        store: Optional[ConversationStore] = None,
        users: Optional[UserManager] = None,
    ):
        self.context_cache = context_cache
        self.product_matcher = product_matcher
        self.loader = loader or ContextFileLoader()
        self.llm_client = llm_client or LLMClient()
        self.store = store or conversation_store
        self.users = users or user_manager

    async def process_message(
        self,
        user_id: str,
        message: str,
        user_name: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Answer one message and persist the exchange.

        Returns:
            ``{"user_message": ChatTurn, "assistant_message": ChatTurn}``

        Raises:
            UserResolutionError: the user could not be found or created.
            ContextUnavailableError: no reference documents, fresh or stale.
            MessagePersistenceError: a message could not be stored.
        """
        user = self.users.get_or_create_user(user_id, name=user_name, email=user_email)
        if not user:
            raise UserResolutionError("Failed to create or retrieve user")

        context_result, chat_history = await asyncio.gather(
            self.context_cache.get(self.loader),
            self.store.get_chat_history(user_id, settings.chat_history_limit),
        )
        if context_result.state is CacheState.STALE:
            logger.warning("Answering with stale context documents")
        if not context_result.available:
            raise ContextUnavailableError("Failed to load system context")
        context = context_result.data

        formatted_history = format_chat_history_for_ai(chat_history)
        smart_products = self.product_matcher.get_smart_product_context(message, context.product)
        system_prompt = generate_system_prompt(
            context, formatted_history, smart_products, user_name=user.name
        )

        saved_user_message = await self.store.save_chat_message(user_id, message, "user")
        if not saved_user_message:
            raise MessagePersistenceError("Failed to save user message")

        ai_response = await self.llm_client.generate(system_prompt, message)

        saved_assistant_message = await self.store.save_chat_message(
            user_id, ai_response, "assistant"
        )
        if not saved_assistant_message:
            raise MessagePersistenceError("Failed to save assistant message")

        return {
            "user_message": saved_user_message,
            "assistant_message": saved_assistant_message,
        }

    async def warm_caches(self, force: bool = False) -> bool:
        """Load the context documents and build the product index ahead of traffic."""
        if force:
            self.context_cache.clear()
            self.product_matcher.invalidate()

        logger.info("Warming context cache...")
        context = await self.context_cache.get_cached_context_files(self.loader)
        if context is None:
            return False

        logger.info("Warming product index...")
        for query in WARM_UP_QUERIES:
            self.product_matcher.get_smart_product_context(query, context.product)
        return True

    def get_performance_stats(self) -> Dict[str, Any]:
        return {
            "context_cache": self.context_cache.get_status(),
            "product_index": self.product_matcher.get_product_index_stats(),
        }
