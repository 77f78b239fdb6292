"""Keyword-based product matching for prompt context.

Instead of sending the whole catalog to the LLM, only the handful of products
that match the customer's query are rendered into the system prompt.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from src.analytics.logger import logger
from src.matching.keyword_extractor import extract_search_terms
from src.matching.product_index import ProductEntry, build_product_index
from src.matching.relevance_scorer import ScoredProduct, calculate_relevance_score
from src.matching.vocabulary import DEFAULT_VOCABULARY, MatchingVocabulary
from src.utils.clock import Clock, elapsed_ms, system_clock
from src.utils.config import settings

NO_PRODUCTS_CONTEXT = (
    "Current conversation doesn't require specific product recommendations. "
    "Provide general guidance."
)
PRODUCT_CONTEXT_HEADER = "RELEVANT PRODUCTS (recommend max 3):"
PRODUCT_CONTEXT_FOOTER = (
    "IMPORTANT: Only recommend products from this list. "
    "Verify URLs exist before suggesting."
)

_WORD_START = re.compile(r"\b\w")


def title_case(name: str) -> str:
    """Capitalize the first letter of every word."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), name)


@dataclass(frozen=True)
class ProductIndexEntry:
    """Built index and the time it was built."""

    entries: List[ProductEntry]
    built_at: datetime


class ProductMatcher:
    """Finds catalog products relevant to a query, with a TTL'd index."""

    def __init__(
        self,
        clock: Clock = system_clock,
        ttl_seconds: Optional[int] = None,
        vocabulary: Optional[MatchingVocabulary] = None,
        url_prefix: Optional[str] = None,
        brand_prefix: Optional[str] = None,
    ):
        self.clock = clock
        self.ttl = timedelta(
            seconds=settings.product_index_ttl if ttl_seconds is None else ttl_seconds
        )
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.url_prefix = url_prefix
        self.brand_prefix = brand_prefix
        self._index: Optional[ProductIndexEntry] = None

    def rebuild_index(self, catalog_text: str) -> List[ProductEntry]:
        """Rebuild the index from catalog text regardless of its age."""
        logger.info("Rebuilding product index...")
        entries = build_product_index(
            catalog_text,
            url_prefix=self.url_prefix,
            brand_prefix=self.brand_prefix,
            vocabulary=self.vocabulary,
        )
        self._index = ProductIndexEntry(entries=entries, built_at=self.clock.now())
        logger.info(f"Product index built with {len(entries)} products")
        return entries

    def get_index(self, catalog_text: str) -> List[ProductEntry]:
        """Current index, rebuilt first if absent or older than the TTL."""
        index = self._index
        if index is None or self.clock.now() - index.built_at > self.ttl:
            return self.rebuild_index(catalog_text)
        return index.entries

    def invalidate(self) -> None:
        """Drop the index; the next lookup rebuilds it."""
        self._index = None

    def find_relevant_products(
        self, query: str, catalog_text: str, limit: int = 3
    ) -> List[ScoredProduct]:
        """Top products for a query, best first.

        Products scoring zero are excluded. Equal scores keep catalog order.
        """
        index = self.get_index(catalog_text)

        search_terms = extract_search_terms(query, self.vocabulary)
        if not search_terms or limit <= 0:
            return []

        scored = [
            ScoredProduct(
                entry=entry,
                score=calculate_relevance_score(search_terms, entry, self.vocabulary),
            )
            for entry in index
        ]
        matches = [product for product in scored if product.score > 0]
        matches.sort(key=lambda product: product.score, reverse=True)
        return matches[:limit]

    def get_smart_product_context(
        self, query: str, catalog_text: str, limit: Optional[int] = None
    ) -> str:
        """Render matching products as a prompt block."""
        relevant = self.find_relevant_products(
            query, catalog_text, limit=settings.product_context_limit if limit is None else limit
        )
        if not relevant:
            return NO_PRODUCTS_CONTEXT

        product_list = "\n".join(
            f"- [{title_case(product.name)}]({product.url})" for product in relevant
        )
        return f"{PRODUCT_CONTEXT_HEADER}\n{product_list}\n\n{PRODUCT_CONTEXT_FOOTER}"

    def get_product_index_stats(self) -> Dict[str, Any]:
        """Index size and age; never triggers a rebuild."""
        index = self._index
        if index is None:
            return {"indexed": 0, "last_updated": None, "cache_age_ms": 0}

        return {
            "indexed": len(index.entries),
            "last_updated": index.built_at.isoformat(),
            "cache_age_ms": elapsed_ms(index.built_at, self.clock.now()),
        }
