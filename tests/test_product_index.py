"""Tests for building the product index from catalog text."""
from src.matching.product_index import build_product_index, extract_keywords


def test_entry_derived_from_url():
    """Test slug, name and keywords come from the URL."""
    url = "https://thegurtoys.com/products/gurtoy-push-car-rabbit-car-for-kids"

    [entry] = build_product_index(url)

    assert entry.url == url
    assert entry.slug == "gurtoy-push-car-rabbit-car-for-kids"
    assert entry.name == "push car rabbit car for kids"
    # Six words: only vocabulary words are kept
    assert entry.keywords == ("push", "car", "kids")


def test_short_names_keep_every_word():
    """Test names of five words or fewer are fully descriptive."""
    [entry] = build_product_index("https://thegurtoys.com/products/gurtoy-wooden-abacus-set")

    assert entry.name == "wooden abacus set"
    assert entry.keywords == ("wooden", "abacus", "set")


def test_noise_lines_are_skipped(sample_catalog):
    """Test blank lines, prose and foreign URLs are ignored."""
    entries = build_product_index(sample_catalog)

    assert [entry.name for entry in entries] == [
        "push car rabbit car for kids",
        "pink doll house for girls with accessories",
        "kids bike blue",
        "wooden abacus",
        "baby stroller navy",
    ]


def test_duplicate_urls_are_preserved():
    """Test the index does not deduplicate catalog lines."""
    url = "https://thegurtoys.com/products/gurtoy-kids-bike-blue"

    entries = build_product_index(f"{url}\n{url}\n")

    assert len(entries) == 2
    assert entries[0] == entries[1]


def test_whitespace_and_crlf_lines():
    """Test surrounding whitespace and Windows line endings."""
    text = "  https://thegurtoys.com/products/gurtoy-kids-bike-blue  \r\n\r\n"

    [entry] = build_product_index(text)

    assert entry.slug == "gurtoy-kids-bike-blue"
    assert entry.url == "https://thegurtoys.com/products/gurtoy-kids-bike-blue"


def test_empty_or_malformed_catalog_builds_empty_index():
    """Test bad catalog text is not an error."""
    assert build_product_index("") == []
    assert build_product_index(None) == []
    assert build_product_index("no urls here\njust text") == []


def test_custom_prefixes():
    """Test the URL prefix and brand token are configurable."""
    entries = build_product_index(
        "https://shop.example/p/acme-red-scooter",
        url_prefix="https://shop.example/p/",
        brand_prefix="acme-",
    )

    assert entries[0].name == "red scooter"


def test_rebuild_is_deterministic(sample_catalog):
    """Test building twice from the same text gives equal entries."""
    first = build_product_index(sample_catalog)
    second = build_product_index(sample_catalog)

    assert first == second
    assert [e.keywords for e in first] == [e.keywords for e in second]


def test_long_name_keywords_use_vocabulary():
    """Test long names keep colors, categories and attributes."""
    keywords = extract_keywords("pink doll house for girls with accessories")

    assert keywords == ("pink", "doll")
