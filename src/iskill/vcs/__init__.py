"""Version control access for iskill."""

from iskill.vcs.git import GitClient, create_git_client

__all__ = [
    "GitClient",
    "create_git_client",
]
