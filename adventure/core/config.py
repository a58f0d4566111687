from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import yaml


CONFIG_FILENAME = "adventure.yaml"
DEFAULT_SAVE_NAME = "taSave.json"


@dataclass(frozen=True)
class AdventureConfig:
    save_dir: str
    save_name: str
    audit_path: str
    world_path: str | None = None

    @property
    def save_path(self) -> Path:
        return Path(self.save_dir) / self.save_name


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def default_save_dir() -> Path:
    home = os.getenv("ADVENTURE_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".adventure"


def find_config(path: str | Path | None = None) -> Path | None:
    if path is not None:
        return Path(path)

    env_path = os.getenv("ADVENTURE_CONFIG")
    if env_path:
        return Path(env_path)

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def _resolve(base: Path, value: str) -> str:
    p = Path(value).expanduser()
    if not p.is_absolute():
        p = base / p
    return str(p.resolve())


def load_config(path: str | Path | None = None) -> AdventureConfig:
    config_path = find_config(path)
    if config_path is None:
        save_dir = default_save_dir()
        return AdventureConfig(
            save_dir=str(save_dir),
            save_name=DEFAULT_SAVE_NAME,
            audit_path=str(save_dir / "audit.jsonl"),
        )

    config_path = config_path.resolve()
    raw = load_yaml(config_path)
    base = config_path.parent

    save_raw = raw.get("save", {}) or {}
    if save_raw.get("dir"):
        save_dir = _resolve(base, str(save_raw["dir"]))
    else:
        save_dir = str(default_save_dir())
    save_name = str(save_raw.get("name", DEFAULT_SAVE_NAME))

    audit_raw = raw.get("audit", {}) or {}
    if audit_raw.get("path"):
        audit_path = _resolve(base, str(audit_raw["path"]))
    else:
        audit_path = str(Path(save_dir) / "audit.jsonl")

    world_path = None
    if raw.get("world"):
        world_path = _resolve(base, str(raw["world"]))

    return AdventureConfig(save_dir=save_dir, save_name=save_name, audit_path=audit_path, world_path=world_path)
