from __future__ import annotations

"""Small helpers for reading project paths and compiler options from config params."""

from pathlib import Path
from typing import Dict, List


def _get(d: Dict, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
        if cur is None:
            return default
    return cur


def project_root(p: Dict) -> Path:
    return Path(_get(p, "project", "root", default="."))


def resolve(p: Dict, *parts: str) -> Path:
    """Join `parts` onto the project root unless the first part is absolute."""
    return project_root(p).joinpath(*parts)


def src_dir(p: Dict) -> str:
    return _get(p, "project", "src_dir", default="src")


def public_dir(p: Dict) -> str:
    return _get(p, "project", "public_dir", default="public")


def modules_dir(p: Dict) -> str:
    return _get(p, "project", "modules_dir", default="node_modules")


def js_entry(p: Dict) -> str:
    return _get(p, "javascript", "entry", default="index.jsx")


def bundle_name(p: Dict) -> str:
    return _get(p, "javascript", "bundle", default="bundle.js")


def babel_presets(p: Dict) -> List[str]:
    return list(
        _get(p, "javascript", "presets", default=["stage-1", "es2015", "react"])
    )


def css_entry(p: Dict) -> str:
    return _get(p, "styles", "entry", default="style.scss")


def output_style(p: Dict) -> str:
    return _get(p, "styles", "output_style", default="nested")
