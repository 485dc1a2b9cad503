from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.chroot import chroot_cmd
from ..lib.files import append_file, write_file
from ..lib.manifests import load_desktops_manifest
from ..lib.pkg import pacman_install
from ..session import InstallContext

logger = logging.getLogger(__name__)


class InstallDesktopStep:
    step_id = "80_install_desktop"
    title = "Installing desktop environment"

    def applies(self, ctx: InstallContext) -> bool:
        return bool(ctx.record.desktop_enabled)

    def _write_user_files(self, ctx: InstallContext, desktop: Dict[str, Any]) -> None:
        user = ctx.record.username
        user_files = desktop.get("user_files") or []
        for item in user_files:
            rel = f"/home/{user}/{str(item['path']).lstrip('/')}"
            writer = append_file if item.get("append") else write_file
            writer(ctx.target_root, rel, str(item.get("content") or ""), dry_run=ctx.dry_run)
        if user_files:
            chroot_cmd(ctx.runner, ctx.target_root, ["chown", "-R", f"{user}:{user}", f"/home/{user}"])

    def run(self, ctx: InstallContext) -> None:
        name = ctx.record.desktop_environment
        desktops = load_desktops_manifest()
        desktop = desktops.get(name)
        if desktop is None:
            raise RuntimeError(f"Unknown desktop environment: {name!r}")

        pacman_install(ctx.runner, ctx.target_root, list(desktop.get("packages") or []))

        aur_packages = list(desktop.get("aur_packages") or [])
        if aur_packages:
            if ctx.record.aur_helper and ctx.record.aur_helper != "none":
                # The helper is built by a later stage; it installs these right after.
                ctx.session.pending_aur_packages.extend(aur_packages)
                logger.info("Queued AUR packages for %s: %s", name, " ".join(aur_packages))
            else:
                logger.warning("AUR helper not selected - installing minimal X11")
                pacman_install(ctx.runner, ctx.target_root, list(desktop.get("fallback_packages") or []))

        self._write_user_files(ctx, desktop)

        for service in desktop.get("services") or []:
            chroot_cmd(ctx.runner, ctx.target_root, ["systemctl", "enable", str(service)])

        logger.info("Desktop installed: %s", name)
