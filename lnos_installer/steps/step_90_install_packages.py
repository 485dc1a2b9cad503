from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..lib.chroot import temporary_pacman_grant
from ..lib.manifests import load_packages_manifest, load_profiles_manifest
from ..lib.pkg import aur_helper_command, aur_install, pacman_install, read_package_list
from ..session import InstallContext

logger = logging.getLogger(__name__)


def _dedup(packages: List[str]) -> List[str]:
    out: List[str] = []
    for p in packages:
        if p not in out:
            out.append(p)
    return out


class InstallPackagesStep:
    step_id = "90_install_packages"
    title = "Installing packages for profile"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def _profile_packages(self, ctx: InstallContext, profile: Dict[str, Any]) -> List[str]:
        if profile.get("replace_baseline"):
            return list(profile.get("packages") or [])

        packages = list(load_packages_manifest().get("baseline") or [])
        packages += list(profile.get("packages") or [])

        package_file = profile.get("package_file")
        if package_file:
            path = Path(ctx.paths.package_lists_dir) / str(package_file)
            extra = read_package_list(str(path))
            if extra:
                logger.info("Adding %d packages from %s", len(extra), str(path))
            else:
                logger.debug("No extra package list at %s", str(path))
            packages += extra

        if profile.get("custom"):
            answer = ctx.prompter.text("+ Enter additional packages (space-separated, or blank)")
            packages += answer.split()

        return _dedup(packages)

    def run(self, ctx: InstallContext) -> None:
        rec = ctx.record
        name = rec.package_profile
        profile = load_profiles_manifest().get(name)
        if profile is None:
            raise RuntimeError(f"Unknown package profile: {name!r}")

        packages = self._profile_packages(ctx, profile)
        pacman_install(ctx.runner, ctx.target_root, packages)

        aur_packages = list(profile.get("aur_packages") or [])
        if aur_packages and rec.aur_helper not in ("", "none"):
            with temporary_pacman_grant(ctx.target_root, rec.username, dry_run=ctx.dry_run):
                aur_install(ctx.runner, ctx.target_root, rec.username, aur_helper_command(rec.aur_helper), aur_packages)

        logger.info("Packages installed for profile %s", name)
