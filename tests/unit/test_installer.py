"""
Unit tests for the skill installer.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from iskill.errors import GitError, SkillInstallError, SourceCloneError, TargetPathError
from iskill.skills import (
    InstallMethod,
    InstallOptions,
    Installer,
    OutcomeStatus,
    Resolver,
    Scanner,
    Skill,
)


@pytest.fixture
def installer(temp_dir, fake_git) -> Installer:
    resolver = Resolver(cache_dir=temp_dir / "cache", git_factory=fake_git, cwd=temp_dir)
    return Installer(resolver=resolver, git_factory=fake_git, cwd=temp_dir)


def _entries(path: Path) -> list[str]:
    return sorted(p.name for p in path.iterdir())


# =============================================================================
# Install
# =============================================================================


class TestInstall:
    """Tests for Installer.install."""

    @pytest.mark.asyncio
    async def test_symlink_install(self, installer, source_dir, target_dir):
        report = await installer.install(str(source_dir), target_dir)

        assert sorted(o.name for o in report.installed) == ["alpha", "beta"]
        link = target_dir / "alpha"
        assert link.is_symlink()
        assert Path(os.readlink(link)) == source_dir / "skills" / "alpha"
        assert (link / "SKILL.md").is_file()

    @pytest.mark.asyncio
    async def test_copy_install(self, installer, source_dir, target_dir):
        options = InstallOptions(method=InstallMethod.COPY)
        await installer.install(str(source_dir), target_dir, options)

        copied = target_dir / "beta"
        assert copied.is_dir()
        assert not copied.is_symlink()
        assert (copied / "SKILL.md").read_text(encoding="utf-8") == (
            source_dir / "skills" / "beta" / "SKILL.md"
        ).read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_copy_is_independent(self, installer, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir, InstallOptions(method=InstallMethod.COPY))
        (source_dir / "skills" / "alpha" / "extra.md").write_text("new", encoding="utf-8")
        assert not (target_dir / "alpha" / "extra.md").exists()

    @pytest.mark.asyncio
    async def test_target_created_recursively(self, installer, source_dir, temp_dir):
        target = temp_dir / "a" / "b" / "c"
        await installer.install(str(source_dir), target)
        assert _entries(target) == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_relative_target_uses_cwd(self, installer, source_dir, temp_dir):
        report = await installer.install(str(source_dir), "./rel-skills")
        assert report.target == temp_dir / "rel-skills"
        assert _entries(temp_dir / "rel-skills") == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_existing_entry_skipped(self, installer, source_dir, target_dir):
        existing = target_dir / "alpha"
        existing.mkdir(parents=True)
        (existing / "mine.txt").write_text("keep", encoding="utf-8")

        report = await installer.install(str(source_dir), target_dir)

        assert [o.name for o in report.skipped] == ["alpha"]
        assert [o.name for o in report.installed] == ["beta"]
        assert _entries(existing) == ["mine.txt"]

    @pytest.mark.asyncio
    async def test_dangling_symlink_occupies_name(self, installer, source_dir, target_dir, temp_dir):
        target_dir.mkdir(parents=True)
        (target_dir / "alpha").symlink_to(temp_dir / "gone", target_is_directory=True)

        report = await installer.install(str(source_dir), target_dir)
        assert [o.name for o in report.skipped] == ["alpha"]

    @pytest.mark.asyncio
    async def test_second_install_skips_everything(self, installer, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)
        report = await installer.install(str(source_dir), target_dir)
        assert report.installed == []
        assert len(report.skipped) == 2

    @pytest.mark.asyncio
    async def test_filter_ignores_unknown_names(self, installer, source_dir, target_dir):
        options = InstallOptions(skills=["beta", "does-not-exist"])
        report = await installer.install(str(source_dir), target_dir, options)
        assert [o.name for o in report.installed] == ["beta"]
        assert _entries(target_dir) == ["beta"]

    @pytest.mark.asyncio
    async def test_wildcard_installs_all(self, installer, source_dir, target_dir):
        report = await installer.install(str(source_dir), target_dir, InstallOptions(skills=["*"]))
        assert len(report.installed) == 2

    @pytest.mark.asyncio
    async def test_empty_selection(self, installer, source_dir, target_dir):
        report = await installer.install(str(source_dir), target_dir, InstallOptions(skills=["nope"]))
        assert report.outcomes == []
        assert len(report.available) == 2
        assert _entries(target_dir) == []

    @pytest.mark.asyncio
    async def test_list_only(self, installer, source_dir, target_dir):
        report = await installer.install(str(source_dir), target_dir, InstallOptions(list_only=True))
        assert report.listed_only
        assert sorted(s.name for s in report.available) == ["alpha", "beta"]
        assert report.outcomes == []
        assert _entries(target_dir) == []

    @pytest.mark.asyncio
    async def test_no_skills_found(self, installer, temp_dir, target_dir):
        empty = temp_dir / "empty-source"
        empty.mkdir()
        report = await installer.install(str(empty), target_dir)
        assert report.available == []
        assert report.outcomes == []

    @pytest.mark.asyncio
    async def test_target_is_a_file(self, installer, source_dir, temp_dir):
        occupied = temp_dir / "occupied"
        occupied.write_text("not a directory", encoding="utf-8")

        with pytest.raises(TargetPathError) as exc_info:
            await installer.install(str(source_dir), occupied)
        assert exc_info.value.path == occupied

    @pytest.mark.asyncio
    async def test_remote_install_links_into_cache(self, installer, fake_git, target_dir, temp_dir):
        report = await installer.install("owner/repo", target_dir)
        assert len(report.installed) == 2
        assert Path(os.readlink(target_dir / "alpha")).is_relative_to(temp_dir / "cache")
        assert len(fake_git.clones) == 1

    @pytest.mark.asyncio
    async def test_skill_selector(self, installer, target_dir):
        report = await installer.install("owner/repo@beta", target_dir)
        assert [o.name for o in report.installed] == ["beta"]

    @pytest.mark.asyncio
    async def test_explicit_skills_override_selector(self, installer, target_dir):
        report = await installer.install("owner/repo@beta", target_dir, InstallOptions(skills=["alpha"]))
        assert [o.name for o in report.installed] == ["alpha"]

    @pytest.mark.asyncio
    async def test_unsafe_name_aborts(self, installer, make_skill, temp_dir, target_dir):
        source = temp_dir / "evil"
        make_skill(source, "escape", name="../outside")

        with pytest.raises(SkillInstallError):
            await installer.install(str(source), target_dir)
        assert not (target_dir.parent / "outside").exists()


class TestInstallSkill:
    """Tests for Installer.install_skill."""

    @pytest.mark.asyncio
    async def test_missing_source_raises(self, installer, temp_dir, target_dir):
        skill = Skill(name="ghost", description="d", path=temp_dir / "nowhere")
        with pytest.raises(SkillInstallError) as exc_info:
            await installer.install_skill(skill, target_dir, InstallMethod.COPY)
        assert exc_info.value.skill_name == "ghost"

    @pytest.mark.asyncio
    async def test_slash_in_name_rejected(self, installer, source_dir, target_dir):
        skill = Skill(name="a/b", description="d", path=source_dir / "skills" / "alpha")
        with pytest.raises(SkillInstallError):
            await installer.install_skill(skill, target_dir)

    @pytest.mark.asyncio
    async def test_installed_outcome(self, installer, source_dir, target_dir):
        skill = Skill(name="renamed", description="d", path=source_dir / "skills" / "alpha")
        outcome = await installer.install_skill(skill, target_dir)
        assert outcome.status == OutcomeStatus.INSTALLED
        assert outcome.ok
        assert outcome.path == target_dir / "renamed"


# =============================================================================
# Install from source
# =============================================================================


class TestInstallFromSource:
    """Tests for Installer.install_from_source."""

    @pytest.mark.asyncio
    async def test_local_source_copied(self, installer, source_dir, target_dir):
        report = await installer.install_from_source(str(source_dir), target_dir)

        assert sorted(o.name for o in report.installed) == ["alpha", "beta"]
        assert not (target_dir / "alpha").is_symlink()
        assert (target_dir / "alpha" / "SKILL.md").is_file()
        assert not (target_dir / ".temp").exists()

    @pytest.mark.asyncio
    async def test_remote_source_bypasses_cache(self, installer, fake_git, target_dir, temp_dir):
        report = await installer.install_from_source("owner/repo", target_dir, InstallOptions(skills=["beta"]))

        assert [o.name for o in report.installed] == ["beta"]
        assert fake_git.clones[0][1].parent == target_dir / ".temp"
        assert not (temp_dir / "cache").exists()
        assert _entries(target_dir) == ["beta"]

    @pytest.mark.asyncio
    async def test_selector_applies(self, installer, target_dir):
        report = await installer.install_from_source("owner/repo@alpha", target_dir)
        assert [o.name for o in report.installed] == ["alpha"]

    @pytest.mark.asyncio
    async def test_temp_removed_after_clone_error(self, installer, fake_git, target_dir):
        fake_git.clone_error = GitError("unreachable")
        with pytest.raises(SourceCloneError):
            await installer.install_from_source("owner/repo", target_dir)
        assert not (target_dir / ".temp").exists()

    @pytest.mark.asyncio
    async def test_temp_removed_after_install_error(self, installer, make_skill, temp_dir, target_dir):
        source = temp_dir / "evil"
        make_skill(source, "escape", name="../outside")

        with pytest.raises(SkillInstallError):
            await installer.install_from_source(str(source), target_dir)
        assert not (target_dir / ".temp").exists()

    @pytest.mark.asyncio
    async def test_existing_temp_entries_kept(self, installer, source_dir, target_dir):
        other = target_dir / ".temp" / "other-run"
        other.mkdir(parents=True)
        await installer.install_from_source(str(source_dir), target_dir)
        assert _entries(target_dir / ".temp") == ["other-run"]

    @pytest.mark.asyncio
    async def test_no_matching_skills_warns(self, installer, source_dir, target_dir, caplog):
        with caplog.at_level(logging.WARNING, logger="iskill"):
            report = await installer.install_from_source(
                str(source_dir), target_dir, InstallOptions(skills=["nope"])
            )

        assert report.outcomes == []
        assert "No matching skills found" in caplog.text
        assert _entries(target_dir) == []

    @pytest.mark.asyncio
    async def test_empty_source_warns(self, installer, temp_dir, target_dir, caplog):
        empty = temp_dir / "empty-source"
        empty.mkdir()

        with caplog.at_level(logging.WARNING, logger="iskill"):
            report = await installer.install_from_source(str(empty), target_dir)

        assert report.available == []
        assert f"No skills found in {empty}" in caplog.text

    @pytest.mark.asyncio
    async def test_target_is_a_file(self, installer, source_dir, temp_dir):
        occupied = temp_dir / "occupied"
        occupied.write_text("not a directory", encoding="utf-8")

        with pytest.raises(TargetPathError):
            await installer.install_from_source(str(source_dir), occupied)

    @pytest.mark.asyncio
    async def test_temp_cleanup_error_keeps_original_error(self, installer, fake_git, target_dir):
        fake_git.clone_error = GitError("unreachable")

        with patch.object(Path, "rmdir", side_effect=PermissionError("denied")):
            with pytest.raises(SourceCloneError):
                await installer.install_from_source("owner/repo", target_dir)


# =============================================================================
# Uninstall
# =============================================================================


class TestUninstall:
    """Tests for Installer.uninstall."""

    @pytest.mark.asyncio
    async def test_uninstall_symlink_keeps_source(self, installer, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)

        outcome = await installer.uninstall("alpha", target_dir)

        assert outcome.status == OutcomeStatus.REMOVED
        assert not os.path.lexists(target_dir / "alpha")
        assert (source_dir / "skills" / "alpha" / "SKILL.md").is_file()
        assert [s.name for s in Scanner().scan(target_dir)] == ["beta"]

    @pytest.mark.asyncio
    async def test_uninstall_copy(self, installer, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir, InstallOptions(method=InstallMethod.COPY))
        await installer.uninstall("beta", target_dir)
        assert _entries(target_dir) == ["alpha"]

    @pytest.mark.asyncio
    async def test_uninstall_all_leaves_nothing(self, installer, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)
        for name in ("alpha", "beta"):
            await installer.uninstall(name, target_dir)
        assert Scanner().scan(target_dir) == []

    @pytest.mark.asyncio
    async def test_uninstall_missing(self, installer, target_dir):
        outcome = await installer.uninstall("ghost", target_dir)
        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert not outcome.ok


# =============================================================================
# Update / check
# =============================================================================


class TestUpdate:
    """Tests for update and check with a fake git client."""

    @pytest.mark.asyncio
    async def test_update_symlink_pulls_link_target(self, installer, fake_git, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)

        outcome = await installer.update("alpha", target_dir)

        assert outcome.status == OutcomeStatus.UPDATED
        client = fake_git.clients[-1]
        assert client.base_dir == source_dir / "skills" / "alpha"
        assert client.search_parent_directories is True
        assert fake_git.pulls == [source_dir / "skills" / "alpha"]

    @pytest.mark.asyncio
    async def test_update_copy_pulls_copy(self, installer, fake_git, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir, InstallOptions(method=InstallMethod.COPY))

        await installer.update("beta", target_dir)

        client = fake_git.clients[-1]
        assert client.base_dir == target_dir / "beta"
        assert client.search_parent_directories is False

    @pytest.mark.asyncio
    async def test_update_missing(self, installer, fake_git, target_dir):
        outcome = await installer.update("ghost", target_dir)
        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert fake_git.pulls == []

    @pytest.mark.asyncio
    async def test_update_failure_reported(self, installer, fake_git, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)
        fake_git.pull_error = GitError("no remote")

        outcome = await installer.update("alpha", target_dir)

        assert outcome.status == OutcomeStatus.FAILED
        assert "no remote" in outcome.error

    @pytest.mark.asyncio
    async def test_update_all(self, installer, fake_git, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)
        fake_git.pull_error = GitError("offline")

        outcomes = await installer.update_all(target_dir)

        assert sorted(o.name for o in outcomes) == ["alpha", "beta"]
        assert all(o.status == OutcomeStatus.FAILED for o in outcomes)

    @pytest.mark.asyncio
    async def test_update_all_empty_target(self, installer, target_dir):
        assert await installer.update_all(target_dir) == []

    @pytest.mark.asyncio
    async def test_check_updates(self, installer, fake_git, source_dir, target_dir):
        await installer.install(str(source_dir), target_dir)

        assert await installer.check_updates(target_dir) == {"alpha": False, "beta": False}

        fake_git.behind = True
        assert await installer.check_updates(target_dir) == {"alpha": True, "beta": True}

    @pytest.mark.asyncio
    async def test_check_errors_mean_no_update(self, source_dir, target_dir, temp_dir):
        class BrokenClient:
            async def has_updates(self) -> bool:
                raise GitError("not a repository")

        installer = Installer(
            resolver=Resolver(cache_dir=temp_dir / "cache", cwd=temp_dir),
            git_factory=lambda *args, **kwargs: BrokenClient(),
        )
        await installer.install(str(source_dir), target_dir)

        assert await installer.check_updates(target_dir) == {"alpha": False, "beta": False}
