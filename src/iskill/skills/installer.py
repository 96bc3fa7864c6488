"""
Skill installer for iskill.

Installs skills from a source into a target directory, and removes, updates
and checks them afterwards. The installed entry itself (a symlink or a copied
directory at ``<target>/<name>``) is the only state kept.

Symlink installs point at the resolved source, so updating one pulls the
shared clone. Copy installs are independent and can only be updated when the
copy is itself a git working copy.
"""

import asyncio
import contextlib
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from iskill.errors import ISkillError, SkillInstallError, TargetPathError
from iskill.skills.models import (
    InstallMethod,
    InstallOptions,
    InstallReport,
    OutcomeStatus,
    Skill,
    SkillOutcome,
)
from iskill.skills.resolver import Resolver
from iskill.skills.scanner import Scanner
from iskill.storage.files import (
    copy_directory,
    create_symlink,
    is_symlink,
    path_exists,
    remove_path,
)
from iskill.storage.paths import ensure_directory, resolve_target_path
from iskill.vcs.git import GitClient, create_git_client

logger = logging.getLogger(__name__)

TEMP_DIR_NAME = ".temp"


def _is_safe_name(name: str) -> bool:
    return name not in (".", "..") and "/" not in name and os.sep not in name


class Installer:
    """Installs and maintains skills in target directories.

    Args:
        resolver: Source resolver.
        scanner: Scanner used on target and temporary directories.
        git_factory: Creates git clients for update and check.
        cwd: Directory relative target paths are resolved against.
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        scanner: Scanner | None = None,
        git_factory: Callable[..., GitClient] = create_git_client,
        cwd: Path | None = None,
    ):
        self.scanner = scanner or Scanner()
        self.resolver = resolver or Resolver(scanner=self.scanner)
        self.git_factory = git_factory
        self.cwd = cwd

    def resolve_path(self, target_path: str | Path) -> Path:
        """Absolute form of a target path."""
        return resolve_target_path(target_path, self.cwd)

    async def _prepare_target(self, target_path: str | Path) -> Path:
        target = self.resolve_path(target_path)
        try:
            await asyncio.to_thread(ensure_directory, target)
        except OSError as e:
            logger.error(f"Cannot create {target}: {e}")
            raise TargetPathError(target, str(e)) from e
        return target

    def _with_selector(self, source: str, options: InstallOptions) -> InstallOptions:
        # owner/repo@skill selects a skill unless names were given explicitly
        selected = self.resolver.resolve(source).skill
        if selected and not options.skills:
            return options.model_copy(update={"skills": [selected]})
        return options

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    async def install(
        self,
        source: str,
        target_path: str | Path,
        options: InstallOptions | None = None,
    ) -> InstallReport:
        """Install skills from ``source`` into ``target_path``.

        With ``options.list_only`` nothing is installed; the report carries
        the available skills. An empty discovery or an empty selection is a
        warning, not an error.

        Raises:
            TargetPathError: If the target directory cannot be created.
            SkillInstallError: On the first skill that fails to install.
                Skills installed before it stay in place.
        """
        options = options or InstallOptions()
        target = await self._prepare_target(target_path)

        report = InstallReport(source=source, target=target, listed_only=options.list_only)
        report.available = await self.resolver.list_skills(source)

        if not report.available:
            logger.warning(f"No skills found in {source}")
            return report

        if options.list_only:
            return report

        options = self._with_selector(source, options)
        selected = options.select(report.available)
        if not selected:
            logger.warning("No matching skills found")
            return report

        for skill in selected:
            outcome = await self.install_skill(skill, target, options.method, source)
            report.outcomes.append(outcome)

        logger.info(f"Successfully installed {len(report.installed)} skill(s)")
        return report

    async def install_skill(
        self,
        skill: Skill,
        target_path: str | Path,
        method: InstallMethod = InstallMethod.SYMLINK,
        source: str | None = None,
    ) -> SkillOutcome:
        """Install one skill at ``<target_path>/<skill.name>``.

        An existing entry at the destination is left untouched.

        Raises:
            SkillInstallError: If the link or copy cannot be created.
        """
        destination = Path(target_path) / skill.name

        if not _is_safe_name(skill.name):
            raise SkillInstallError(skill.name, destination, "skill name is not a valid directory name")

        if path_exists(destination):
            logger.warning(f"Skill {skill.name} already exists at {destination}")
            return SkillOutcome(skill.name, OutcomeStatus.SKIPPED, destination)

        try:
            if method == InstallMethod.SYMLINK:
                await asyncio.to_thread(create_symlink, skill.path, destination)
                logger.debug(f"Created symlink: {destination} -> {skill.path}")
            else:
                await asyncio.to_thread(copy_directory, skill.path, destination)
                logger.debug(f"Copied skill: {skill.path} -> {destination}")
        except OSError as e:
            logger.error(f"Failed to install {skill.name}: {e}")
            raise SkillInstallError(skill.name, destination, str(e)) from e

        logger.info(f"Installed {skill.name}" + (f" from {source}" if source else ""))
        return SkillOutcome(skill.name, OutcomeStatus.INSTALLED, destination)

    async def install_from_source(
        self,
        source: str,
        target_path: str | Path,
        options: InstallOptions | None = None,
    ) -> InstallReport:
        """Install by copying from a fresh clone in ``<target>/.temp/<timestamp>``.

        The cache is bypassed. The temporary clone is removed on every exit
        path.

        Raises:
            TargetPathError: If the target directory cannot be created.
            SourceCloneError: If the source cannot be cloned or copied.
            SkillInstallError: On the first skill that fails to install.
        """
        options = options or InstallOptions()
        target = await self._prepare_target(target_path)

        temp_root = target / TEMP_DIR_NAME
        temp_dir = temp_root / str(int(time.time() * 1000))
        report = InstallReport(source=source, target=target)

        try:
            resolved = await self.resolver.clone(source, temp_dir)
            scan_root = temp_dir / resolved.path if resolved.is_remote and resolved.path else temp_dir
            report.available = await asyncio.to_thread(self.scanner.scan, scan_root)
            if not report.available:
                logger.warning(f"No skills found in {source}")
                return report

            selected = self._with_selector(source, options).select(report.available)
            if not selected:
                logger.warning("No matching skills found")
                return report

            for skill in selected:
                outcome = await self.install_skill(skill, target, InstallMethod.COPY, source)
                report.outcomes.append(outcome)

            logger.info(f"Successfully installed {len(report.installed)} skill(s)")
        finally:
            await asyncio.to_thread(remove_path, temp_dir)
            with contextlib.suppress(OSError):
                await asyncio.to_thread(temp_root.rmdir)

        return report

    # ------------------------------------------------------------------
    # Uninstall
    # ------------------------------------------------------------------

    async def uninstall(self, skill_name: str, target_path: str | Path) -> SkillOutcome:
        """Remove an installed skill. A missing skill is a warning only.

        Symlinked installs lose only the link; the linked source is kept.
        """
        skill_path = self.resolve_path(target_path) / skill_name

        if not path_exists(skill_path):
            logger.warning(f"Skill {skill_name} not found at {skill_path}")
            return SkillOutcome(skill_name, OutcomeStatus.NOT_FOUND, skill_path)

        try:
            await asyncio.to_thread(remove_path, skill_path)
        except OSError as e:
            logger.error(f"Failed to uninstall {skill_name}: {e}")
            raise

        logger.info(f"Uninstalled {skill_name}")
        return SkillOutcome(skill_name, OutcomeStatus.REMOVED, skill_path)

    # ------------------------------------------------------------------
    # Update / check
    # ------------------------------------------------------------------

    def _git_for(self, skill_path: Path) -> GitClient:
        """Git client for an installed skill.

        A symlinked skill is updated where the link points, usually a
        subdirectory of a clone. A copied skill must be a working copy itself.
        """
        if is_symlink(skill_path):
            link_target = Path(os.readlink(skill_path))
            if not link_target.is_absolute():
                link_target = skill_path.parent / link_target
            return self.git_factory(link_target, search_parent_directories=True)
        return self.git_factory(skill_path)

    async def update(self, skill_name: str, target_path: str | Path) -> SkillOutcome:
        """Pull updates for one installed skill.

        Failures are logged as warnings and reported in the outcome.
        """
        skill_path = self.resolve_path(target_path) / skill_name

        if not path_exists(skill_path):
            logger.warning(f"Skill {skill_name} not found at {skill_path}")
            return SkillOutcome(skill_name, OutcomeStatus.NOT_FOUND, skill_path)

        if is_symlink(skill_path):
            logger.info(f"{skill_name} is a symlink, updating source")
        else:
            logger.info(f"{skill_name} is a copy, updating")

        try:
            await self._git_for(skill_path).pull()
        except (ISkillError, OSError) as e:
            logger.warning(f"Failed to pull updates for {skill_path}: {e}")
            return SkillOutcome(skill_name, OutcomeStatus.FAILED, skill_path, error=str(e))

        logger.info(f"Updated {skill_name}")
        return SkillOutcome(skill_name, OutcomeStatus.UPDATED, skill_path)

    async def update_all(self, target_path: str | Path) -> list[SkillOutcome]:
        """Update every skill a scan of ``target_path`` finds, one at a time."""
        target = self.resolve_path(target_path)
        skills = await asyncio.to_thread(self.scanner.scan, target)

        outcomes = []
        for skill in skills:
            outcomes.append(await self.update(skill.name, target))

        logger.info(f"Updated {len(skills)} skill(s)")
        return outcomes

    async def check_skill_update(self, skill: Skill) -> bool:
        """True if the skill's working copy is behind its remote.

        Errors count as no update.
        """
        try:
            return await self._git_for(skill.path).has_updates()
        except Exception as e:
            logger.debug(f"Could not check {skill.name} for updates: {e}")
            return False

    async def check_updates(self, target_path: str | Path) -> dict[str, bool]:
        """Map each installed skill name to whether an update is available."""
        target = self.resolve_path(target_path)
        skills = await asyncio.to_thread(self.scanner.scan, target)

        updates: dict[str, bool] = {}
        for skill in skills:
            updates[skill.name] = await self.check_skill_update(skill)
        return updates


def create_installer(
    resolver: Resolver | None = None,
    scanner: Scanner | None = None,
) -> Installer:
    """Create an installer with default collaborators."""
    return Installer(resolver, scanner)
