from __future__ import annotations

import copy
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import numpy as np
import yaml


def load_config(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def merge_config(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Recursively merge override into a deep copy of base."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def ensure_outdir(outdir: str) -> None:
    os.makedirs(outdir, exist_ok=True)


def save_solution(
    outdir: str,
    name: str,
    meta: Optional[Dict[str, Any]] = None,
    **arrays: np.ndarray,
) -> str:
    """Write arrays plus metadata to <outdir>/<name>.npz and return the path."""
    ensure_outdir(outdir)
    filename = os.path.join(outdir, f"{name}.npz")
    np.savez(
        filename,
        meta=json.dumps(meta or {}),
        created=datetime.now(timezone.utc).isoformat(),
        **{k: np.asarray(v) for k, v in arrays.items()},
    )
    return filename


def load_solution(path: str) -> Dict[str, Any]:
    """Read a file written by save_solution; meta is decoded back to a dict."""
    with np.load(path, allow_pickle=False) as data:
        out: Dict[str, Any] = {k: data[k] for k in data.files}
    out["meta"] = json.loads(str(out["meta"]))
    out["created"] = str(out["created"])
    return out
