"""Provider-to-category assignment.

Categories are user-defined and stored by the caller; this package only
resolves a transaction's provider against a supplied mapping.
"""

from .mapping import assign_category, build_category_index, normalize_provider_key

__all__ = ["assign_category", "build_category_index", "normalize_provider_key"]
