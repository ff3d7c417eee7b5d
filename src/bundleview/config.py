"""Index configuration loading (JSON/YAML)."""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List
import json

import yaml

from .errors import config_error

__all__ = ["REPORTERS", "IndexConfig", "load_config", "parse_config"]

REPORTERS = ("plain", "rich", "json", "silent")


@dataclass(slots=True)
class IndexConfig:
    directories: List[Path] = field(default_factory=list)
    reporter: str = "plain"
    verbosity: int = 0


def load_config(path: str | Path) -> IndexConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise config_error(f"Cannot parse {p.name}: {e}", {"path": str(p)}) from e
    return parse_config(data, base_dir=p.parent)


def parse_config(data: Any, base_dir: Path | None = None) -> IndexConfig:
    if not isinstance(data, dict):
        raise config_error("Root of configuration must be an object")
    dirs = data.get("directories")
    if not isinstance(dirs, list) or not dirs:
        raise config_error("'directories' must be a non-empty list")
    directories: List[Path] = []
    for i, d in enumerate(dirs):
        if not isinstance(d, str) or not d:
            raise config_error(f"directories[{i}] must be a non-empty string")
        p = Path(d)
        if not p.is_absolute() and base_dir is not None:
            p = base_dir / p
        directories.append(p)
    reporter = data.get("reporter", "plain")
    if reporter not in REPORTERS:
        raise config_error(
            f"Unknown reporter {reporter!r}", {"allowed": list(REPORTERS)}
        )
    verbosity = data.get("verbosity", 0)
    if not isinstance(verbosity, int) or isinstance(verbosity, bool) or verbosity < 0:
        raise config_error("'verbosity' must be a non-negative integer")
    return IndexConfig(
        directories=directories, reporter=reporter, verbosity=verbosity
    )
