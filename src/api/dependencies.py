"""Process-wide service instances handed to routes via ``Depends``.

The caches live here, owned by the request layer, and are passed to the
agent by reference. Tests swap them with ``app.dependency_overrides``.
"""
from functools import lru_cache

from src.agent.support_agent import SupportAgent
from src.context.context_cache import ContextCache
from src.matching.product_matcher import ProductMatcher
from src.utils.clock import system_clock


@lru_cache(maxsize=None)
def get_context_cache() -> ContextCache:
    return ContextCache(clock=system_clock)


@lru_cache(maxsize=None)
def get_product_matcher() -> ProductMatcher:
    return ProductMatcher(clock=system_clock)


@lru_cache(maxsize=None)
def get_support_agent() -> SupportAgent:
    return SupportAgent(
        context_cache=get_context_cache(),
        product_matcher=get_product_matcher(),
    )
