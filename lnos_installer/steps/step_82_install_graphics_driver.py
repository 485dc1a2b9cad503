from __future__ import annotations

import logging

from ..lib.manifests import load_drivers_manifest
from ..lib.pkg import pacman_install
from ..session import InstallContext

logger = logging.getLogger(__name__)


class InstallGraphicsDriverStep:
    step_id = "82_install_graphics_driver"
    title = "Installing graphics driver"

    def applies(self, ctx: InstallContext) -> bool:
        driver = ctx.record.desktop_graphics_driver
        return bool(ctx.record.desktop_enabled) and driver not in ("", "none")

    def run(self, ctx: InstallContext) -> None:
        name = ctx.record.desktop_graphics_driver
        driver = load_drivers_manifest().get(name)
        if driver is None:
            raise RuntimeError(f"Unknown graphics driver: {name!r}")

        packages = list(driver.get("packages") or [])
        if ctx.record.multilib_enabled:
            packages += list(driver.get("multilib_packages") or [])
        pacman_install(ctx.runner, ctx.target_root, packages)
        logger.info("Graphics driver installed: %s", name)
