"""
Remote skill search client.

Queries the skills directory API for skills matching a keyword. Search is
best-effort: any failure yields no results.
"""

import logging
import os
from typing import Any

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://skills.sh"
SEARCH_ENDPOINT = "/api/search"
DEFAULT_LIMIT = 10


def get_api_url() -> str:
    """Base URL of the search API, overridable with SKILLS_API_URL."""
    return os.environ.get("SKILLS_API_URL") or DEFAULT_API_URL


class SearchResult(BaseModel):
    """A ranked search hit."""

    name: str
    slug: str = Field(..., description="Directory identifier of the skill")
    source: str = Field(default="", description="Source descriptor, usually owner/repo")
    installs: int = 0

    @property
    def package(self) -> str:
        """What to pass to ``iskill add``."""
        return self.source or self.slug

    @property
    def install_ref(self) -> str:
        """``package@name`` form selecting just this skill."""
        return f"{self.package}@{self.name}"


def _map_search_results(data: dict[str, Any]) -> list[SearchResult]:
    """Map the API response to SearchResult objects, keeping rank order."""
    results = []
    # Response format: {"skills": [{"id": "...", "name": "...", "installs": 0, "source": "..."}]}
    for item in data.get("skills") or []:
        name = item.get("name")
        slug = item.get("id")
        if not name or not slug:
            continue

        results.append(
            SearchResult(
                name=name,
                slug=slug,
                source=item.get("source") or "",
                installs=item.get("installs") or 0,
            )
        )
    return results


class SkillSearchClient:
    """Client for the skills search API.

    Args:
        base_url: API root. Defaults to SKILLS_API_URL or https://skills.sh.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used in tests.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or get_api_url()).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
        """Search for skills. Returns [] on any failure."""
        query = query.strip()
        if not query:
            return []

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}{SEARCH_ENDPOINT}",
                    params={"q": query, "limit": limit},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Skill search for '{query}' failed: {e}")
            return []

        if not isinstance(data, dict):
            logger.debug(f"Unexpected search response for '{query}'")
            return []

        try:
            return _map_search_results(data)[:limit]
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug(f"Could not read search results for '{query}': {e}")
            return []
