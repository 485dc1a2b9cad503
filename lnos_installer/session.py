from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .lib.command import CommandRunner
from .lib.env import PATHS, Paths
from .lib.prompt import Prompter
from .record import ConfigRecord

DIAGNOSTIC_NAME = "installer.err"


@dataclass
class InstallationSession:
    """Pipeline-scoped scratch state. Never persisted."""

    boot_mode: Optional[str] = None
    root_device: Optional[str] = None
    current_step: Optional[str] = None
    work_dir: Optional[str] = None
    pending_aur_packages: List[str] = field(default_factory=list)

    @property
    def diagnostic_path(self) -> Optional[Path]:
        if not self.work_dir:
            return None
        return Path(self.work_dir) / DIAGNOSTIC_NAME


@dataclass
class InstallContext:
    """Everything a pipeline stage may touch, passed by reference."""

    record: ConfigRecord
    session: InstallationSession
    runner: CommandRunner
    prompter: Prompter
    paths: Paths = PATHS
    config_path: str = PATHS.config_default
    log_path: str = PATHS.log_default

    @property
    def target_root(self) -> str:
        return self.paths.target_root

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    @property
    def root_device(self) -> str:
        """The opened encrypted mapping once there is one, else the raw partition."""

        return self.session.root_device or self.record.root_partition

    @property
    def uefi(self) -> bool:
        return self.session.boot_mode == "uefi"
