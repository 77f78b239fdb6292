"""Build a searchable product index from the raw catalog text.

The catalog document is one product URL per line, for example::

    https://thegurtoys.com/products/gurtoy-push-car-rabbit-car-for-kids

Each recognised line becomes a :class:`ProductEntry` whose name and keywords
are derived from the URL slug.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from src.matching.vocabulary import DEFAULT_VOCABULARY, MatchingVocabulary
from src.utils.config import settings


@dataclass(frozen=True)
class ProductEntry:
    """One catalog product as seen by the matcher."""

    url: str
    slug: str
    name: str
    keywords: Tuple[str, ...]

    @property
    def search_text(self) -> str:
        """Name and keywords joined, lowercased, as matched by the scorer."""
        return f"{self.name} {' '.join(self.keywords)}".lower()


def slug_to_name(slug: str, brand_prefix: str) -> str:
    """Human-readable name for a URL slug."""
    name = slug.replace(brand_prefix, "") if brand_prefix else slug
    return name.replace("-", " ").lower()


def extract_keywords(
    name: str, vocabulary: Optional[MatchingVocabulary] = None
) -> Tuple[str, ...]:
    """Keywords for a product name.

    Short names (five words or fewer) are assumed to be fully descriptive and
    keep every word; longer names keep only vocabulary words.
    """
    vocab = vocabulary or DEFAULT_VOCABULARY
    words = name.lower().split()
    keep_all = len(words) <= vocab.short_name_word_limit
    known = vocab.index_vocabulary

    keywords = [
        word
        for word in words
        if len(word) >= vocab.min_keyword_length and (keep_all or word in known)
    ]
    return tuple(dict.fromkeys(keywords))


def build_product_index(
    catalog_text: str,
    url_prefix: Optional[str] = None,
    brand_prefix: Optional[str] = None,
    vocabulary: Optional[MatchingVocabulary] = None,
) -> List[ProductEntry]:
    """Parse catalog text into product entries.

    Lines that are blank or do not start with the catalog URL prefix are
    ignored. Entries keep catalog order; duplicate URLs are kept as-is.
    """
    prefix = settings.catalog_url_prefix if url_prefix is None else url_prefix
    brand = settings.catalog_brand_prefix if brand_prefix is None else brand_prefix

    entries: List[ProductEntry] = []
    for line in (catalog_text or "").splitlines():
        url = line.strip()
        if not url or not url.startswith(prefix):
            continue

        slug = url.rstrip("/").rsplit("/", 1)[-1]
        name = slug_to_name(slug, brand)
        entries.append(
            ProductEntry(
                url=url,
                slug=slug,
                name=name,
                keywords=extract_keywords(name, vocabulary),
            )
        )

    return entries
