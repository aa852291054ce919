"""Provider-based category lookup.

When a user assigns a category to a transaction, the caller remembers it as
a provider -> category mapping. Newly imported transactions whose provider
matches a remembered key pick that category up automatically.
"""

from collections.abc import Mapping
from typing import TypeVar

CategoryT = TypeVar("CategoryT")


def normalize_provider_key(provider: str | None) -> str:
    """Case-insensitive exact-match key for a provider label.

    This is not fuzzy matching: "Amazon" and "AMAZON" share a key,
    "Amazon Prime" does not.
    """
    return (provider or "").strip().lower()


def build_category_index(mappings: Mapping[str, CategoryT]) -> dict[str, CategoryT]:
    """Re-key a provider -> category mapping by normalized provider.

    Later entries win when two providers normalize to the same key.
    """
    index: dict[str, CategoryT] = {}
    for provider, category in mappings.items():
        key = normalize_provider_key(provider)
        if key:
            index[key] = category
    return index


def assign_category(
    provider: str | None, index: Mapping[str, CategoryT]
) -> CategoryT | None:
    """Category remembered for ``provider``, or None when uncategorized.

    Args:
        provider: Provider label of the imported transaction
        index: Mapping produced by build_category_index
    """
    key = normalize_provider_key(provider)
    if not key:
        return None
    return index.get(key)
