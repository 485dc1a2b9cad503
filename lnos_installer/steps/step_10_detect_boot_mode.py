from __future__ import annotations

import logging

from ..lib.firmware import detect_boot_mode
from ..session import InstallContext

logger = logging.getLogger(__name__)


class DetectBootModeStep:
    step_id = "10_detect_boot_mode"
    title = "Detecting boot mode"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        ctx.session.boot_mode = detect_boot_mode(ctx.paths.efi_marker)
        logger.info("Boot mode: %s", ctx.session.boot_mode)

        ctx.runner.run(["timedatectl", "set-ntp", "true"])
