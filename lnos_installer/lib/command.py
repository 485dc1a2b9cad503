from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import ExternalOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _log_lines(prefix: str, text: str) -> None:
    for line in text.splitlines():
        if line.strip():
            logger.debug("%s %s", prefix, line.rstrip())


class CommandRunner:
    """Run external tools with consistent logging.

    - Always logs the command (never its standard input, which may carry a
      passphrase).
    - Captures stdout/stderr and records them line by line at DEBUG.
    - dry_run logs but does not execute, except for ``query=True`` commands
      which only read system state.
    - check=True turns a nonzero exit into ExternalOperationError.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        query: bool = False,
        interactive: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        logger.debug("CMD %s", _fmt_argv(argv_list))

        if self.dry_run and not query:
            logger.info("Would run: %s", _fmt_argv(argv_list))
            return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

        try:
            if interactive:
                p = subprocess.run(argv_list, cwd=cwd, env=dict(os.environ, **(env or {})))
                stdout, stderr = "", ""
            else:
                p = subprocess.run(
                    argv_list,
                    input=input_text,
                    text=True,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    cwd=cwd,
                    env=dict(os.environ, **(env or {})),
                )
                stdout, stderr = p.stdout or "", p.stderr or ""
        except FileNotFoundError as e:
            # Missing binary behaves like a shell's "command not found".
            if check:
                raise ExternalOperationError(argv_list, 127, str(e)) from e
            return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

        _log_lines("STDOUT", stdout)
        _log_lines("STDERR", stderr)

        if check and p.returncode != 0:
            raise ExternalOperationError(argv_list, p.returncode, stderr)

        return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
