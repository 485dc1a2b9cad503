"""Shared fakes for the installer tests.

FakeRunner records every command instead of executing it, ScriptedPrompter
answers prompts from a table, and make_paths builds a throwaway tree that
stands in for the live environment and the mounted target.
"""

import shutil
import tempfile
import unittest
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lnos_installer.errors import ExternalOperationError
from lnos_installer.lib.command import CmdResult, CommandRunner
from lnos_installer.lib.env import Paths
from lnos_installer.record import ConfigRecord

_MISSING = object()

LOCALE_GEN = """# Configuration file for locale-gen
#de_DE.UTF-8 UTF-8
#de_DE ISO-8859-1
#en_US.UTF-8 UTF-8
#en_US ISO-8859-1
#fr_FR.UTF-8 UTF-8
"""

TARGET_FILES = {
    "etc/locale.gen": LOCALE_GEN,
    "etc/sudoers": "root ALL=(ALL:ALL) ALL\n# %wheel ALL=(ALL:ALL) ALL\n# %sudo ALL=(ALL:ALL) ALL\n",
    "etc/default/grub": 'GRUB_DEFAULT=0\nGRUB_CMDLINE_LINUX_DEFAULT="loglevel=3 quiet"\n',
    "etc/mkinitcpio.conf": "MODULES=()\nHOOKS=(base udev autodetect modconf block filesystems fsck)\n",
    "etc/pacman.conf": (
        "[core]\nInclude = /etc/pacman.d/mirrorlist\n\n"
        "#[multilib-testing]\n#Include = /etc/pacman.d/mirrorlist\n\n"
        "#[multilib]\n#Include = /etc/pacman.d/mirrorlist\n"
    ),
}


class FakeRunner(CommandRunner):
    """CommandRunner that records argv and returns canned results.

    ``outputs`` and ``failures`` are keyed by argv prefixes. A command run
    through arch-chroot also matches on the part after the target root.
    """

    def __init__(
        self,
        outputs: Optional[Dict[Tuple[str, ...], str]] = None,
        failures: Optional[Dict[Tuple[str, ...], int]] = None,
        *,
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self.outputs = outputs or {}
        self.failures = failures or {}
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []

    @staticmethod
    def _matches(argv: Sequence[str], prefix: Tuple[str, ...]) -> bool:
        candidates = [list(argv)]
        if argv and argv[0] == "arch-chroot":
            candidates.append(list(argv[2:]))
        return any(tuple(c[: len(prefix)]) == prefix for c in candidates)

    def run(self, argv, *, check=True, env=None, cwd=None, input_text=None, query=False, interactive=False):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input_text)

        rc = 0
        for prefix, code in self.failures.items():
            if self._matches(argv, prefix):
                rc = code
        out = ""
        for prefix, text in self.outputs.items():
            if self._matches(argv, prefix):
                out = text

        if check and rc != 0:
            raise ExternalOperationError(argv, rc, "simulated failure")
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr="")

    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(self._matches(c, tuple(prefix)) for c in self.calls)

    def index(self, *prefix: str) -> int:
        for i, c in enumerate(self.calls):
            if self._matches(c, tuple(prefix)):
                return i
        raise AssertionError(f"Command never ran: {' '.join(prefix)}")


class ScriptedPrompter:
    """Answers prompts whose header contains a scripted key.

    A list value is consumed one answer per prompt. An answer that is
    KeyboardInterrupt (class or instance) is raised instead of returned.
    Unscripted confirms and text prompts fall back to their defaults;
    unscripted menus fail the test.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses = dict(responses or {})
        self.asked: List[Tuple[str, str]] = []

    def _answer(self, kind: str, header: str, default: Any = _MISSING) -> Any:
        self.asked.append((kind, header))
        for key, value in self.responses.items():
            if key not in header:
                continue
            if isinstance(value, list):
                if not value:
                    continue
                value = value.pop(0)
            if value is KeyboardInterrupt or isinstance(value, KeyboardInterrupt):
                raise KeyboardInterrupt
            return value
        if default is _MISSING:
            raise AssertionError(f"Unscripted prompt: {header}")
        return default

    def text(self, header: str, default: str = "") -> str:
        return self._answer("text", header, default)

    def secret(self, header: str) -> str:
        return self._answer("secret", header)

    def select(self, header: str, choices: Sequence[str]) -> str:
        return self._answer("select", header)

    def fuzzy(self, header: str, choices: Sequence[str]) -> str:
        return self._answer("fuzzy", header)

    def confirm(self, message: str, default: bool = True) -> bool:
        return self._answer("confirm", message, default)

    def headers(self) -> List[str]:
        return [h for _, h in self.asked]


def complete_record(**overrides: Any) -> ConfigRecord:
    """A fully resolved record: Minimal profile, no desktop, GRUB, ext4."""

    record = ConfigRecord(
        username="alice",
        password="pw1",
        root_password="pw2",
        timezone="America/Chicago",
        locale_lang="en_US",
        locale_gen_list=["en_US.UTF-8 UTF-8", "en_US ISO-8859-1"],
        vconsole_keymap="us",
        disk="/dev/sda",
        boot_partition="/dev/sda1",
        root_partition="/dev/sda2",
        filesystem="ext4",
        bootloader="grub",
        encryption_enabled=False,
        desktop_enabled=False,
        desktop_environment="TTY",
        desktop_graphics_driver="",
        multilib_enabled=False,
        aur_helper="none",
        package_profile="Minimal",
    )
    for key, value in overrides.items():
        setattr(record, key, value)
    return record


def make_paths(base: Path, *, uefi: bool = False) -> Paths:
    """Lay out a fake live environment and target root under ``base``."""

    target = base / "mnt"
    for rel, contents in TARGET_FILES.items():
        p = target / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(contents, encoding="utf-8")

    zoneinfo = base / "zoneinfo"
    (zoneinfo / "America").mkdir(parents=True)
    (zoneinfo / "America" / "Chicago").write_text("TZif", encoding="utf-8")
    (zoneinfo / "Europe").mkdir()
    (zoneinfo / "Europe" / "Berlin").write_text("TZif", encoding="utf-8")

    locales = base / "locales"
    locales.mkdir()
    for name in ("de_DE", "en_US", "en_US@euro", "fr_FR", "xx_YY"):
        (locales / name).write_text("", encoding="utf-8")

    locale_gen = base / "locale.gen"
    locale_gen.write_text(LOCALE_GEN, encoding="utf-8")

    efi = base / "efi"
    if uefi:
        efi.mkdir()

    return Paths(
        target_root=str(target),
        config_default=str(base / "installer.conf"),
        log_default=str(base / "installer.log"),
        work_parent=str(base),
        efi_marker=str(efi),
        zoneinfo_dir=str(zoneinfo),
        locales_dir=str(locales),
        locale_gen=str(locale_gen),
        package_lists_dir=str(base / "pacman-packages"),
        aux_source=str(base / "LnOS"),
    )


class TempDirTestCase(unittest.TestCase):
    """Gives every test a fresh scratch directory."""

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)
