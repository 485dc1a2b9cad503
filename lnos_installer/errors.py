"""Exception hierarchy for the installer.

Only ValidationError is recovered locally (the selection step re-prompts).
Everything else escalates to the top-level ErrorRecovery handler.
"""

from __future__ import annotations

from typing import Optional, Sequence


class InstallerError(Exception):
    """Base exception for installer errors"""


class ValidationError(InstallerError):
    """An operator answer failed a field rule (empty, mismatched, unknown)"""


class UserCancellation(InstallerError):
    """The operator asked to abort the installation"""


class ConfigLoadError(InstallerError):
    """The persisted configuration exists but cannot be read"""


class ExternalOperationError(InstallerError):
    """A capability provider reported failure"""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: str = "",
        *,
        message: Optional[str] = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"Command '{' '.join(self.argv)}' failed with code {returncode}")
