from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigLoadError
from .record import BOOL_FIELDS, LIST_FIELDS, SECRET_FIELDS, ConfigRecord

logger = logging.getLogger(__name__)

KEY_PREFIX = "LNOS_"
SECRET_MASK = "*****"


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to shell assignments for .conf and unknown extensions.
    return "shell"


def _key(name: str) -> str:
    return KEY_PREFIX + name.upper()


def _sh_quote(value: str) -> str:
    return "'" + value.replace("'", "'\"'\"'") + "'"


def _to_text(name: str, value: Any) -> Any:
    if name in SECRET_FIELDS:
        return SECRET_MASK
    if name in BOOL_FIELDS:
        return "" if value is None else ("true" if value else "false")
    if name in LIST_FIELDS:
        return [str(v) for v in value]
    return str(value)


def record_to_mapping(record: ConfigRecord) -> Dict[str, Any]:
    """Flat KEY -> value mapping with secrets masked."""

    return {_key(n): _to_text(n, getattr(record, n)) for n in ConfigRecord.field_names()}


def _render_shell(mapping: Dict[str, Any]) -> str:
    lines = []
    for key, value in mapping.items():
        if isinstance(value, list):
            lines.append(f"{key}=(" + " ".join(_sh_quote(v) for v in value) + ")")
        else:
            lines.append(f"{key}={_sh_quote(value)}")
    return "\n".join(lines) + "\n"


def _parse_shell(text: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    pending = ""
    for raw in text.splitlines():
        pending = f"{pending}\n{raw}" if pending else raw
        stripped = pending.strip()
        if not stripped or stripped.startswith("#"):
            pending = ""
            continue
        key, sep, rest = stripped.partition("=")
        if not sep or not key.isidentifier():
            raise ConfigLoadError(f"Malformed line in config: {raw!r}")
        is_list = rest.startswith("(")
        body = rest[1:-1] if is_list and rest.endswith(")") else rest
        try:
            tokens = shlex.split(body)
        except ValueError:
            # Quoted value spans lines; keep reading.
            continue
        if is_list and not rest.endswith(")"):
            continue
        data[key] = tokens if is_list else " ".join(tokens)
        pending = ""
    if pending:
        raise ConfigLoadError("Unterminated value at end of config")
    return data


def _apply_mapping(record: ConfigRecord, data: Dict[str, Any]) -> None:
    known = {_key(n): n for n in ConfigRecord.field_names()}
    for key, value in data.items():
        name = known.get(key)
        if name is None:
            logger.debug("Ignoring unknown config key %s", key)
            continue
        if name in SECRET_FIELDS:
            # A masked secret is not a password; leave it to be asked again.
            if value and value != SECRET_MASK:
                setattr(record, name, str(value))
            continue
        if name in LIST_FIELDS:
            if not isinstance(value, list):
                value = [value] if value else []
            setattr(record, name, [str(v) for v in value])
        elif name in BOOL_FIELDS:
            text = str(value).strip().lower()
            setattr(record, name, True if text == "true" else (False if text == "false" else None))
        else:
            setattr(record, name, "" if value is None else str(value))


def load_config(path: str, record: ConfigRecord) -> bool:
    """Import a persisted record into ``record``.

    Returns False when there is no prior record. Raises ConfigLoadError when
    the file exists but cannot be read.
    """

    p = Path(path)
    if not p.exists():
        return False

    try:
        text = p.read_text(encoding="utf-8")
        if _detect_format(p) == "yaml":
            data: Optional[Dict[str, Any]] = yaml.safe_load(text) or {}
        else:
            data = _parse_shell(text)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Cannot read {p}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config file must be a mapping, got {type(data).__name__}")

    _apply_mapping(record, data)
    logger.debug("Loaded config from %s", str(p))
    return True


def save_config(path: str, record: ConfigRecord) -> None:
    """Overwrite the persisted record. Secrets are always written masked."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    mapping = record_to_mapping(record)
    if _detect_format(p) == "yaml":
        p.write_text(yaml.safe_dump(mapping, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(_render_shell(mapping), encoding="utf-8")


class ConfigStore:
    """Binds a record to its persisted file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self, record: ConfigRecord) -> bool:
        return load_config(self.path, record)

    def save(self, record: ConfigRecord) -> None:
        save_config(self.path, record)
