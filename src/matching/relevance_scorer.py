"""Heuristic relevance scoring of products against search terms."""

from dataclasses import dataclass
from typing import Iterable, Optional

from src.matching.product_index import ProductEntry
from src.matching.vocabulary import DEFAULT_VOCABULARY, MatchingVocabulary


@dataclass(frozen=True)
class ScoredProduct:
    """A product entry with its score for one query."""

    entry: ProductEntry
    score: int

    @property
    def url(self) -> str:
        return self.entry.url

    @property
    def name(self) -> str:
        return self.entry.name

    def to_dict(self) -> dict:
        return {
            "url": self.entry.url,
            "slug": self.entry.slug,
            "name": self.entry.name,
            "keywords": list(self.entry.keywords),
            "score": self.score,
        }


def calculate_relevance_score(
    search_terms: Iterable[str],
    product: ProductEntry,
    vocabulary: Optional[MatchingVocabulary] = None,
) -> int:
    """Score a product against search terms.

    Per term, the three tiers stack: a term found in the product text also
    gets the prefix points, and a keyword hit gets all three. Popular product
    words add a flat bonus that does not depend on the query.
    """
    vocab = vocabulary or DEFAULT_VOCABULARY
    weights = vocab.weights
    text = product.search_text
    score = 0

    for term in search_terms:
        if not term:
            continue

        if term in text:
            score += weights.exact_match

        if term[: weights.partial_prefix_length] in text:
            score += weights.partial_match

        if term in product.keywords:
            score += weights.keyword_match

    for popular in vocab.popular_products:
        if popular in text:
            score += weights.popularity_bonus

    return score
