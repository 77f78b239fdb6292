"""Vocabulary tables used by query parsing, indexing and scoring.

Everything the matcher treats as domain knowledge lives here as data, so the
tables can be swapped or extended without touching the algorithms.
"""

import re
from dataclasses import dataclass, field
from typing import Tuple
from re import Pattern


@dataclass(frozen=True)
class CategorySynonym:
    """A query pattern and the canonical keywords it expands to."""

    pattern: Pattern
    keywords: Tuple[str, ...]

    @classmethod
    def from_alternatives(cls, alternatives: str, *keywords: str) -> "CategorySynonym":
        return cls(pattern=re.compile(alternatives, re.IGNORECASE), keywords=tuple(keywords))


@dataclass(frozen=True)
class ScoringWeights:
    """Points awarded by the relevance scorer."""

    exact_match: int = 10
    partial_match: int = 3
    keyword_match: int = 15
    popularity_bonus: int = 2
    partial_prefix_length: int = 4


@dataclass(frozen=True)
class MatchingVocabulary:
    """Fixed word lists and patterns for the toy catalog."""

    categories: Tuple[str, ...]
    attributes: Tuple[str, ...]
    age_groups: Tuple[str, ...]
    colors: Tuple[str, ...]
    popular_products: Tuple[str, ...]
    stop_words: Tuple[str, ...]
    category_synonyms: Tuple[CategorySynonym, ...]
    interest_keywords: Tuple[str, ...]
    age_pattern: Pattern
    boy_pattern: Pattern
    girl_pattern: Pattern
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    # Names with at most this many words keep every word as a keyword
    short_name_word_limit: int = 5
    min_keyword_length: int = 3
    min_term_length: int = 3
    max_age_digits: int = 3

    @property
    def index_vocabulary(self) -> frozenset:
        """Words that make a product-name token a keyword."""
        return frozenset(self.categories + self.attributes + self.age_groups + self.colors)

    def parse_age(self, digits: str) -> int:
        """Age number from a matched digit run.

        Runs longer than ``max_age_digits`` (after leading zeros) are not
        converted and read as the largest age.
        """
        significant = digits.lstrip("0") or "0"
        if len(significant) > self.max_age_digits:
            return 10 ** self.max_age_digits - 1
        return int(significant)

    def age_bucket(self, age: int) -> Tuple[str, ...]:
        """Map an age number to coarse search terms."""
        if age <= 2:
            return ("baby", "toddler")
        if age <= 5:
            return ("kids", "child")
        return ("kids",)


DEFAULT_VOCABULARY = MatchingVocabulary(
    categories=("car", "bike", "doll", "toy", "kids", "baby", "ride", "push", "scooter", "stroller"),
    attributes=("rechargeable", "battery", "electric", "educational", "musical", "interactive"),
    age_groups=("baby", "toddler", "kids", "child", "infant"),
    colors=("pink", "blue", "red", "green", "yellow", "white", "black", "navy"),
    popular_products=("car", "bike", "doll", "educational", "stroller", "scooter"),
    stop_words=(
        "for", "and", "the", "with", "can", "you", "please",
        "want", "need", "looking", "good", "best",
    ),
    category_synonyms=(
        CategorySynonym.from_alternatives("car|gaadi|vehicle", "car", "vehicle"),
        CategorySynonym.from_alternatives("bike|cycle|bicycle", "bike", "cycle"),
        CategorySynonym.from_alternatives("doll|barbie|gudiya", "doll"),
        CategorySynonym.from_alternatives("educational|learning|study", "educational"),
        CategorySynonym.from_alternatives("music|musical|song", "musical"),
        CategorySynonym.from_alternatives("outdoor|bahar", "outdoor", "ride"),
        CategorySynonym.from_alternatives("indoor|ghar", "indoor"),
        CategorySynonym.from_alternatives("creative|art|drawing", "creative", "art"),
    ),
    interest_keywords=(
        "educational", "puzzle", "toy", "car", "doll", "bike",
        "outdoor", "indoor", "creative", "building", "musical",
    ),
    age_pattern=re.compile(r"(?<!\d)(\d+)\s*(year|month|yr|mo|saal)", re.IGNORECASE),
    boy_pattern=re.compile(r"\b(boy|boys|ladka|beta)\b", re.IGNORECASE),
    girl_pattern=re.compile(r"\b(girl|girls|ladki|beti)\b", re.IGNORECASE),
)
