from __future__ import annotations

import logging
import shutil
import tempfile
import traceback
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from .errors import ExternalOperationError, UserCancellation
from .lib.env import PATHS, Paths
from .record import ConfigRecord
from .session import InstallationSession

logger = logging.getLogger(__name__)

CANCELLED_EXIT_CODE = 130


def exit_code_for(exc: Optional[BaseException]) -> int:
    if exc is None:
        return 0
    if isinstance(exc, (UserCancellation, KeyboardInterrupt)):
        return CANCELLED_EXIT_CODE
    if isinstance(exc, SystemExit):
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    if isinstance(exc, ExternalOperationError):
        # Negative codes mean the child was killed by that signal.
        if exc.returncode < 0:
            return 128 - exc.returncode
        return exc.returncode or 1
    return 1


def describe_failure(exc: BaseException, operation: str) -> str:
    """One line naming what failed, during which operation and where."""

    if isinstance(exc, ExternalOperationError):
        what = f"Command '{' '.join(exc.argv)}' failed with code {exc.returncode}"
    else:
        what = f"{type(exc).__name__}: {exc}"

    where = ""
    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    if tb:
        frame = tb[-1]
        where = f" (at {frame.name}:{frame.lineno})"
    return f"{what} during {operation}{where}"


class ErrorRecovery:
    """Top-level guard around a whole installer run.

    On entry it creates the private work directory. ``capture`` records the
    first failure into a diagnostic file there. On exit, whatever the
    outcome, secrets are scrubbed, the work directory removed and the
    outcome reported; the exit status is left in ``exit_code`` and the
    exception is suppressed.
    """

    def __init__(
        self,
        session: InstallationSession,
        record: ConfigRecord,
        *,
        log_path: str,
        paths: Paths = PATHS,
    ) -> None:
        self.session = session
        self.record = record
        self.log_path = log_path
        self.paths = paths
        self.exit_code: int = 0

    def __enter__(self) -> "ErrorRecovery":
        Path(self.paths.work_parent).mkdir(parents=True, exist_ok=True)
        self.session.work_dir = tempfile.mkdtemp(prefix=".tmp.", dir=self.paths.work_parent)
        logger.debug("Work directory: %s", self.session.work_dir)
        return self

    def capture(self, exc: BaseException, operation: str) -> None:
        """Write the diagnostic for ``exc`` unless one was already recorded."""

        if isinstance(exc, (UserCancellation, KeyboardInterrupt, SystemExit)):
            return
        path = self.session.diagnostic_path
        if path is None or path.exists():
            return
        path.write_text(describe_failure(exc, operation) + "\n", encoding="utf-8")

    def _take_diagnostic(self) -> Optional[str]:
        path = self.session.diagnostic_path
        if path is None or not path.is_file():
            return None
        text = path.read_text(encoding="utf-8").strip()
        path.unlink()
        return text or None

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        self.exit_code = exit_code_for(exc)

        if exc is not None and self.exit_code not in (0, CANCELLED_EXIT_CODE):
            self.capture(exc, self.session.current_step or "setup")
            if not isinstance(exc, SystemExit):
                logger.debug("Unhandled failure", exc_info=(exc_type, exc, tb))
        diagnostic = self._take_diagnostic()

        self.record.scrub_secrets()
        if self.session.work_dir:
            shutil.rmtree(self.session.work_dir, ignore_errors=True)
            self.session.work_dir = None

        if self.exit_code == CANCELLED_EXIT_CODE:
            logger.warning("Installation cancelled by user")
        elif self.exit_code != 0:
            logger.error("%s", diagnostic or f"Installation failed with code {self.exit_code}")
            logger.warning("Full log: %s", self.log_path)

        return True
