"""
Pytest configuration and fixtures for iskill tests.
"""

import logging
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture(autouse=True)
def iskill_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point ISKILL_HOME at a temporary directory and clear ISKILL_* overrides."""
    home = temp_dir / ".iskill"
    monkeypatch.setenv("ISKILL_HOME", str(home))
    for var in (
        "ISKILL_DEFAULT_PATH",
        "ISKILL_PATHS",
        "ISKILL_INSTALL_METHOD",
        "ISKILL_AUTO_UPDATE",
        "ISKILL_TELEMETRY",
        "SKILLS_API_URL",
    ):
        monkeypatch.delenv(var, raising=False)

    yield home


@pytest.fixture(autouse=True)
def reset_iskill_logger() -> Generator[None, None, None]:
    """Undo the console handler a CLI run installs, so caplog sees records."""
    yield
    logger = logging.getLogger("iskill")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_skill_md() -> str:
    """Provide sample SKILL.md content."""
    return """---
name: test-skill
description: A test skill for unit tests
version: 1.0.0
---

# Test Skill

This is a test skill for unit testing.

## Instructions

1. Do something
2. Do something else
"""


def write_skill(
    parent: Path,
    dirname: str,
    name: str | None = None,
    description: str = "A test skill",
    extra: str = "",
) -> Path:
    """Create ``parent/dirname/SKILL.md`` and return the skill directory."""
    skill_dir = parent / dirname
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(
        f"---\nname: {name or dirname}\ndescription: {description}\n{extra}---\n\n# {name or dirname}\n",
        encoding="utf-8",
    )
    return skill_dir


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    """Provide the skill directory factory."""
    return write_skill


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """A local source with two skills under the ``skills/`` convention."""
    root = temp_dir / "source"
    write_skill(root / "skills", "alpha", description="First skill")
    write_skill(root / "skills", "beta", description="Second skill")
    (root / "README.md").write_text("# Source\n", encoding="utf-8")
    return root


@pytest.fixture
def target_dir(temp_dir: Path) -> Path:
    """An install target that does not exist yet."""
    return temp_dir / "project" / "skills"


class FakeGitClient:
    """Stands in for GitClient; clones copy a template directory."""

    def __init__(self, factory: "FakeGitFactory", base_dir: Path | None, search_parent_directories: bool):
        self.factory = factory
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.search_parent_directories = search_parent_directories

    async def clone(self, url: str, target_dir: str | Path, branch: str | None = None) -> Path:
        self.factory.clones.append((url, Path(target_dir)))
        if self.factory.clone_error:
            raise self.factory.clone_error
        shutil.copytree(self.factory.template, target_dir)
        return Path(target_dir)

    async def pull(self) -> None:
        self.factory.pulls.append(self.base_dir)
        if self.factory.pull_error:
            raise self.factory.pull_error

    async def has_updates(self) -> bool:
        self.factory.checks.append(self.base_dir)
        return self.factory.behind


class FakeGitFactory:
    """Callable git factory recording every operation."""

    def __init__(self, template: Path):
        self.template = template
        self.clones: list[tuple[str, Path]] = []
        self.pulls: list[Path | None] = []
        self.checks: list[Path | None] = []
        self.clients: list[FakeGitClient] = []
        self.clone_error: Exception | None = None
        self.pull_error: Exception | None = None
        self.behind = False

    def __call__(self, base_dir: Path | None = None, search_parent_directories: bool = False) -> FakeGitClient:
        client = FakeGitClient(self, base_dir, search_parent_directories)
        self.clients.append(client)
        return client


@pytest.fixture
def fake_git(source_dir: Path) -> FakeGitFactory:
    """A git factory whose clones reproduce ``source_dir``."""
    return FakeGitFactory(source_dir)
