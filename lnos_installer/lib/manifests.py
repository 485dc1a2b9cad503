from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml


def _manifests_dir() -> Path:
    # lnos_installer/lib/manifests.py -> lnos_installer/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped with the package."""

    p = _manifests_dir() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def load_packages_manifest() -> Dict[str, List[str]]:
    return load_yaml_rel("packages.yaml")


def load_desktops_manifest() -> Dict[str, Dict[str, Any]]:
    return load_yaml_rel("desktops.yaml").get("desktops") or {}


def load_drivers_manifest() -> Dict[str, Dict[str, Any]]:
    return load_yaml_rel("drivers.yaml").get("drivers") or {}


def load_profiles_manifest() -> Dict[str, Dict[str, Any]]:
    return load_yaml_rel("profiles.yaml").get("profiles") or {}


def default_driver() -> str:
    return str(load_yaml_rel("drivers.yaml").get("default") or "mesa")
