from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import yaml

DEFAULTS: Dict[str, Any] = {
    "input": "input.txt",
    "format": "grid",
    "euler": False,
    "trace": False,
    "progress": False,
    "verbose": False,
}

class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")
    return DotDict(data)

def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg

def load_config(path: str | Path | None = None, **overrides) -> DotDict:
    """Defaults, then the YAML file (if any), then non-None overrides."""
    cfg = DotDict(DEFAULTS)
    if path:
        y = load_yaml(path)
        unknown = set(y) - set(DEFAULTS)
        if unknown:
            raise ValueError(f"{path}: unknown config keys: {', '.join(sorted(unknown))}")
        cfg.update(y)
    merge_overrides(cfg, **overrides)
    return cfg
