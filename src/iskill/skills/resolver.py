"""
Source resolver for iskill.

Turns a source string (local path, GitHub shorthand, Git URL) into a
ResolvedSource, materializes remote sources in a clone cache keyed by a hash
of the normalized URL, and scans the result for skills.
"""

import asyncio
import logging
import os
import re
import time
from collections.abc import Callable
from pathlib import Path

from iskill.errors import ISkillError, SourceCloneError
from iskill.skills.models import ResolvedSource, Skill, SourceType
from iskill.skills.scanner import Scanner
from iskill.storage.files import copy_directory, is_directory, path_exists, remove_path
from iskill.storage.paths import ensure_directory, get_cache_dir, resolve_target_path
from iskill.vcs.git import GitClient, create_git_client

logger = logging.getLogger(__name__)

LOCAL_PREFIXES = ("./", "/", "../", "~/")
URL_PREFIXES = ("http://", "https://")
SSH_PREFIX = "git@"
GITHUB_HOST = "github.com"
GITLAB_HOST = "gitlab.com"

_GITHUB_TREE = re.compile(r"/tree/[^/]+(?:/(?P<sub>.+))?$")

FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def cache_key(url: str) -> str:
    """Stable cache directory name for a normalized URL (64-bit FNV-1a, base 36)."""
    value = FNV64_OFFSET
    for byte in url.encode("utf-8"):
        value ^= byte
        value = (value * FNV64_PRIME) & 0xFFFFFFFFFFFFFFFF

    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
        if value == 0:
            break
    return "".join(reversed(digits))


def normalize_github_url(url: str) -> tuple[str, str | None]:
    """Normalize a GitHub web or clone URL.

    Strips a ``/tree/<ref>`` suffix and ensures a ``.git`` suffix. A path
    after the ref (``/tree/main/skills/foo``) is returned as the sub-path.

    Returns:
        (clone URL, sub-path or None)
    """
    url = url.rstrip("/")
    sub_path = None

    match = _GITHUB_TREE.search(url)
    if match:
        sub_path = match.group("sub")
        url = url[: match.start()]

    if not url.endswith(".git"):
        url = f"{url}.git"
    return url, sub_path


def split_skill_selector(shorthand: str) -> tuple[str, str | None]:
    """Split ``owner/repo@skill`` into ``("owner/repo", "skill")``.

    The ``@`` only counts as a selector when it comes after the first ``/``.
    """
    at_index = shorthand.rfind("@")
    slash_index = shorthand.find("/")
    if slash_index < 0 or at_index <= slash_index:
        return shorthand, None

    skill = shorthand[at_index + 1 :] or None
    return shorthand[:at_index], skill


class Resolver:
    """Classifies, caches and scans skill sources.

    Args:
        cache_dir: Root of the clone cache. Defaults to ~/.iskill/cache.
        scanner: Scanner used on materialized sources.
        git_factory: Creates git clients; replaceable for tests.
        cwd: Directory relative local sources are resolved against.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        scanner: Scanner | None = None,
        git_factory: Callable[..., GitClient] = create_git_client,
        cwd: Path | None = None,
    ):
        self.cache_dir = cache_dir or get_cache_dir()
        self.scanner = scanner or Scanner()
        self.git_factory = git_factory
        self.cwd = cwd

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def resolve(self, source: str) -> ResolvedSource:
        """Classify a source string. Pure: nothing is checked on disk.

        First match wins: local paths (``./``, ``/``, ``../`` and ``~/``, so a
        home-relative path is never read as ``owner/repo`` shorthand), then
        http(s) URLs, ``git@`` remotes, GitHub shorthand, and finally a local
        path for anything else.
        """
        source = source.strip()

        if source.startswith(LOCAL_PREFIXES):
            return self._resolve_local(source)

        if source.startswith(URL_PREFIXES):
            return self._resolve_url(source)

        if source.startswith(SSH_PREFIX):
            return ResolvedSource(type=SourceType.GIT, url=source)

        if "/" in source:
            return self._resolve_github_shorthand(source)

        return self._resolve_local(source)

    def _resolve_local(self, source: str) -> ResolvedSource:
        local_path = str(resolve_target_path(source, self.cwd))
        return ResolvedSource(type=SourceType.LOCAL, url=local_path, path=local_path)

    def _resolve_url(self, url: str) -> ResolvedSource:
        if GITHUB_HOST in url:
            normalized, sub_path = normalize_github_url(url)
            return ResolvedSource(type=SourceType.GITHUB, url=normalized, path=sub_path)

        if GITLAB_HOST in url:
            return ResolvedSource(type=SourceType.GITLAB, url=url)

        return ResolvedSource(type=SourceType.GIT, url=url)

    def _resolve_github_shorthand(self, shorthand: str) -> ResolvedSource:
        repo_ref, skill = split_skill_selector(shorthand)
        owner, _, remainder = repo_ref.partition("/")
        repo, _, sub_path = remainder.partition("/")

        url, _ = normalize_github_url(f"https://{GITHUB_HOST}/{owner}/{repo}")
        return ResolvedSource(
            type=SourceType.GITHUB,
            url=url,
            path=sub_path or None,
            skill=skill,
        )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def cache_path_for(self, resolved: ResolvedSource) -> Path:
        """Cache directory for a remote source."""
        return self.cache_dir / cache_key(resolved.url)

    async def _clone_if_needed(self, resolved: ResolvedSource, cache_path: Path) -> None:
        if path_exists(cache_path):
            logger.debug(f"Using cached clone of {resolved.url} at {cache_path}")
            return

        await asyncio.to_thread(ensure_directory, self.cache_dir)

        # Only a finished clone is renamed to the cache path
        partial = self.cache_dir / f".{cache_path.name}.{os.getpid()}.{time.time_ns()}.partial"
        logger.debug(f"Cloning to cache: {resolved.url}")
        try:
            await self.git_factory().clone(resolved.url, partial, resolved.branch)
            try:
                partial.rename(cache_path)
            except OSError:
                if not path_exists(cache_path):
                    raise
                logger.debug(f"Another process cached {resolved.url} first")
        finally:
            if path_exists(partial):
                await asyncio.to_thread(remove_path, partial)

    async def clear_cache(self) -> bool:
        """Remove the whole cache directory.

        Returns:
            True if a cache directory was removed.
        """
        if not path_exists(self.cache_dir):
            return False
        await asyncio.to_thread(remove_path, self.cache_dir)
        logger.info("Cache cleared")
        return True

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    async def materialize(self, source: str) -> tuple[ResolvedSource, Path]:
        """Make a source available on disk, cloning into the cache if needed.

        Returns:
            (resolved source, directory to scan)
        """
        resolved = self.resolve(source)

        if resolved.type == SourceType.LOCAL:
            return resolved, Path(resolved.url)

        cache_path = self.cache_path_for(resolved)
        await self._clone_if_needed(resolved, cache_path)
        scan_path = cache_path / resolved.path if resolved.path else cache_path
        return resolved, scan_path

    async def list_skills(self, source: str) -> list[Skill]:
        """List the skills a source provides.

        Any failure is logged and gives an empty list.
        """
        try:
            _, scan_path = await self.materialize(source)
            skills = await asyncio.to_thread(self.scanner.scan, scan_path)
        except Exception as e:
            logger.error(f"Error listing skills from {source}: {e}")
            return []

        logger.debug(f"Found {len(skills)} skills in {source}")
        return [skill.model_copy(update={"source": source}) for skill in skills]

    async def clone(self, source: str, target_dir: str | Path) -> ResolvedSource:
        """Copy or clone a source into ``target_dir``, bypassing the cache.

        Raises:
            SourceCloneError: If the copy or clone fails.
        """
        resolved = self.resolve(source)
        target_dir = Path(target_dir)
        logger.info(f"Cloning {source} to {target_dir}")

        try:
            if resolved.type == SourceType.LOCAL:
                source_dir = Path(resolved.url)
                if not is_directory(source_dir):
                    raise SourceCloneError(f"Source is not a directory: {source_dir}", source)
                if target_dir.resolve().is_relative_to(source_dir.resolve()):
                    raise SourceCloneError(f"Cannot copy {source_dir} into itself", source)
                await asyncio.to_thread(copy_directory, resolved.url, target_dir)
            else:
                await self.git_factory().clone(resolved.url, target_dir, resolved.branch)
        except SourceCloneError:
            raise
        except (ISkillError, OSError) as e:
            logger.error(f"Error cloning {source}: {e}")
            raise SourceCloneError(f"Error cloning {source}: {e}", source) from e

        logger.debug(f"Cloned {source}")
        return resolved


def create_resolver(cache_dir: Path | None = None) -> Resolver:
    """Create a resolver using the default scanner and git client."""
    return Resolver(cache_dir)
