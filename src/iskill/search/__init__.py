"""Remote skill search."""

from iskill.search.client import (
    DEFAULT_API_URL,
    SearchResult,
    SkillSearchClient,
    get_api_url,
)

__all__ = [
    "DEFAULT_API_URL",
    "SearchResult",
    "SkillSearchClient",
    "get_api_url",
]
