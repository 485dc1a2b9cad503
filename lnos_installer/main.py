from __future__ import annotations

import argparse
import logging
import os
import time
from typing import List, Optional

from . import __version__
from .config_store import ConfigStore
from .errors import ConfigLoadError
from .lib.command import CommandRunner
from .lib.crypt import luks_close
from .lib.env import PATHS, Paths
from .lib.net import is_online
from .lib.prompt import InquirerPrompter, Prompter
from .logging_utils import configure_logging, log_fatal
from .pipeline import Step, run_pipeline
from .record import ConfigRecord
from .recovery import ErrorRecovery
from .selection import SelectionEngine
from .session import InstallationSession, InstallContext
from .steps import (
    ConfigureSystemStep,
    CopyAuxFilesStep,
    DetectBootModeStep,
    EnableMultilibStep,
    EncryptRootStep,
    FinalizeStep,
    FormatStep,
    InstallAurHelperStep,
    InstallBaseStep,
    InstallBootloaderStep,
    InstallDesktopStep,
    InstallGraphicsDriverStep,
    InstallPackagesStep,
    MountStep,
    PartitionDiskStep,
)

logger = logging.getLogger(__name__)

SUPPORTED_TARGETS = ("x86_64",)
NETWORK_RETRY_DELAY = 3.0


def build_steps() -> List[Step]:
    return [
        DetectBootModeStep(),
        PartitionDiskStep(),
        EncryptRootStep(),
        FormatStep(),
        MountStep(),
        InstallBaseStep(),
        ConfigureSystemStep(),
        InstallBootloaderStep(),
        EnableMultilibStep(),
        InstallDesktopStep(),
        InstallGraphicsDriverStep(),
        InstallAurHelperStep(),
        InstallPackagesStep(),
        CopyAuxFilesStep(),
        FinalizeStep(),
    ]


def ensure_network(runner: CommandRunner, *, delay: float = NETWORK_RETRY_DELAY) -> None:
    """Require connectivity, offering nmtui once when offline."""

    if is_online(runner):
        logger.debug("Network reachable")
        return
    logger.warning("No internet connection; opening nmtui")
    runner.run(["nmtui"], check=False, interactive=True)
    time.sleep(delay)
    if not is_online(runner):
        log_fatal(logger, "Still no internet connection")
    logger.info("Network connected")


def offer_reboot(ctx: InstallContext) -> None:
    if not ctx.prompter.confirm("Reboot now?", default=True):
        logger.warning("System is ready at %s. Reboot manually when done.", ctx.target_root)
        return
    ctx.runner.run(["umount", "-R", ctx.target_root])
    if ctx.record.encryption_enabled:
        luks_close(ctx.runner)
    ctx.runner.run(["reboot"])


def run(
    *,
    config_path: str,
    log_path: str,
    dry_run: bool = False,
    prompter: Optional[Prompter] = None,
    runner: Optional[CommandRunner] = None,
    paths: Paths = PATHS,
    steps: Optional[List[Step]] = None,
) -> int:
    """Run one interactive installation and return the process exit status."""

    if os.path.isfile(log_path) and not dry_run:
        os.remove(log_path)
    actual_log_path = configure_logging(log_path=log_path)

    record = ConfigRecord()
    session = InstallationSession()
    runner = runner or CommandRunner(dry_run=dry_run)
    prompter = prompter or InquirerPrompter()
    store = ConfigStore(config_path)

    with ErrorRecovery(session, record, log_path=actual_log_path, paths=paths) as recovery:
        logger.info("LnOS Arch Installer %s", __version__)
        if dry_run:
            logger.warning("Dry run: no changes will be made to this machine")

        ensure_network(runner)

        try:
            if store.load(record):
                logger.info("Loaded saved answers from %s", config_path)
        except ConfigLoadError as e:
            logger.warning("%s; starting with a fresh configuration", e)
            record.reset()

        SelectionEngine(record, store, prompter, runner, paths).run()

        ctx = InstallContext(
            record=record,
            session=session,
            runner=runner,
            prompter=prompter,
            paths=paths,
            config_path=config_path,
            log_path=actual_log_path,
        )

        started = time.monotonic()
        result = run_pipeline(ctx=ctx, steps=steps or build_steps(), on_error=recovery.capture)
        minutes, seconds = divmod(int(time.monotonic() - started), 60)
        logger.debug("Ran steps: %s", ", ".join(result.ran_steps))
        logger.info("Successfully installed LnOS (%dm %ds)", minutes, seconds)

        offer_reboot(ctx)

    return recovery.exit_code


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="lnos-installer", description="LnOS Arch Linux installer")
    p.add_argument("--target", default=None, help="Target architecture (x86_64)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", default=PATHS.config_default, help="Path to saved answers (.conf|.yaml)")
    p.add_argument("--log", default=PATHS.log_default, help="Path to installer log")
    p.add_argument("--dry-run", action="store_true", help="Log commands instead of running them")

    args = p.parse_args(argv)

    if args.target not in SUPPORTED_TARGETS:
        configure_logging(log_path=args.log)
        log_fatal(logger, "Invalid arguments. Use --target=x86_64")

    return run(config_path=args.config, log_path=args.log, dry_run=bool(args.dry_run))
