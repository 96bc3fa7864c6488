"""
Git client for cloning and updating skill sources.

Wraps GitPython. Every operation runs the blocking GitPython call in a worker
thread so callers can await it.
"""

import asyncio
import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from iskill.errors import GitError

logger = logging.getLogger(__name__)


class GitClient:
    """Version control operations rooted at a working directory.

    Args:
        base_dir: Working copy the pull/status operations act on. Not needed
            for ``clone``.
        search_parent_directories: Accept ``base_dir`` being a subdirectory of
            a working copy, as for a skill that lives inside a cloned repo.
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        search_parent_directories: bool = False,
    ):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.search_parent_directories = search_parent_directories

    def _open(self) -> Repo:
        if self.base_dir is None:
            raise GitError("No working directory configured")
        try:
            return Repo(self.base_dir, search_parent_directories=self.search_parent_directories)
        except InvalidGitRepositoryError as e:
            raise GitError(f"Not a git repository: {self.base_dir}") from e
        except NoSuchPathError as e:
            raise GitError(f"Path does not exist: {self.base_dir}") from e

    async def clone(self, url: str, target_dir: str | Path, branch: str | None = None) -> Path:
        """Clone ``url`` into ``target_dir``.

        Raises:
            GitError: If the remote is unreachable or the target is not empty.
        """
        target_dir = Path(target_dir)
        kwargs = {"branch": branch} if branch else {}

        def _clone() -> None:
            Repo.clone_from(url, str(target_dir), **kwargs)

        logger.debug(f"git clone {url} -> {target_dir}")
        try:
            await asyncio.to_thread(_clone)
        except GitCommandError as e:
            raise GitError(f"Failed to clone {url}: {e}") from e
        return target_dir

    async def pull(self) -> None:
        """Pull the tracked remote branch into the working copy.

        Raises:
            GitError: If there is no working copy or no configured remote.
        """

        def _pull() -> None:
            repo = self._open()
            if not repo.remotes:
                raise GitError(f"No remote configured for {self.base_dir}")
            repo.remotes.origin.pull()

        logger.debug(f"git pull in {self.base_dir}")
        try:
            await asyncio.to_thread(_pull)
        except (GitCommandError, AttributeError) as e:
            raise GitError(f"Failed to pull {self.base_dir}: {e}") from e

    async def commits_behind(self) -> int:
        """Fetch, then count commits on the upstream branch not in HEAD."""

        def _behind() -> int:
            repo = self._open()
            repo.git.fetch()
            return int(repo.git.rev_list("--count", "HEAD..@{upstream}"))

        try:
            return await asyncio.to_thread(_behind)
        except (GitCommandError, ValueError) as e:
            raise GitError(f"Failed to compare {self.base_dir} with its remote: {e}") from e

    async def has_updates(self) -> bool:
        """Return True if the working copy is behind its remote."""
        return await self.commits_behind() > 0

    async def current_branch(self) -> str:
        """Name of the checked out branch, ``main`` when detached."""

        def _branch() -> str:
            repo = self._open()
            if repo.head.is_detached:
                return "main"
            return repo.active_branch.name

        return await asyncio.to_thread(_branch)

    async def remote_url(self) -> str | None:
        """Fetch URL of ``origin``, or None when unavailable."""

        def _remote() -> str | None:
            try:
                repo = self._open()
                return repo.remotes.origin.url
            except (GitError, AttributeError, ValueError):
                return None

        return await asyncio.to_thread(_remote)

    async def latest_commit(self) -> str:
        """Hex SHA of HEAD, or an empty string for an empty repository."""

        def _latest() -> str:
            repo = self._open()
            try:
                return repo.head.commit.hexsha
            except ValueError:
                return ""

        return await asyncio.to_thread(_latest)


def create_git_client(
    base_dir: str | Path | None = None,
    search_parent_directories: bool = False,
) -> GitClient:
    """Create a git client for a working directory."""
    return GitClient(base_dir, search_parent_directories=search_parent_directories)
