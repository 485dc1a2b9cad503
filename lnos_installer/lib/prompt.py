from __future__ import annotations

from typing import Protocol, Sequence

from InquirerPy import inquirer


class Prompter(Protocol):
    """Interactive prompt provider.

    Every method blocks until the operator answers. An interrupt (Ctrl-C)
    surfaces as KeyboardInterrupt.
    """

    def text(self, header: str, default: str = "") -> str:
        ...

    def secret(self, header: str) -> str:
        ...

    def select(self, header: str, choices: Sequence[str]) -> str:
        ...

    def fuzzy(self, header: str, choices: Sequence[str]) -> str:
        ...

    def confirm(self, message: str, default: bool = True) -> bool:
        ...


class InquirerPrompter:
    """Prompter backed by InquirerPy."""

    def text(self, header: str, default: str = "") -> str:
        return inquirer.text(message=header, default=default).execute() or ""

    def secret(self, header: str) -> str:
        return inquirer.secret(message=header).execute() or ""

    def select(self, header: str, choices: Sequence[str]) -> str:
        return inquirer.select(message=header, choices=list(choices)).execute() or ""

    def fuzzy(self, header: str, choices: Sequence[str]) -> str:
        return inquirer.fuzzy(message=header, choices=list(choices), max_height="40%").execute() or ""

    def confirm(self, message: str, default: bool = True) -> bool:
        return bool(inquirer.confirm(message=message, default=default).execute())
