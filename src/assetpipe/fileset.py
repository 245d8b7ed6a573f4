"""In-memory files, source file-sets and destination writes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator

from .logging import get_logger


log = get_logger("assetpipe.fileset")

GLOB_CHARS = "*?["


@dataclass
class File:
    base: Path
    relative: Path
    contents: bytes
    source_map: dict | None = None

    @property
    def path(self) -> Path:
        return self.base / self.relative

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")

    def derive(self, **changes) -> "File":
        return replace(self, **changes)


def split_glob(pattern: str) -> tuple[Path, str | None]:
    """Split a pattern into its literal base directory and the glob remainder.

    `node_modules/font-awesome/fonts/*` -> (`node_modules/font-awesome/fonts`, `*`).
    A pattern without glob characters has no remainder.
    """
    parts = Path(pattern).parts
    for i, part in enumerate(parts):
        if any(ch in part for ch in GLOB_CHARS):
            base = Path(*parts[:i]) if i else Path(".")
            return base, "/".join(parts[i:])
    return Path(pattern), None


def src(patterns: Iterable[str], root: Path = Path(".")) -> Iterator[File]:
    """Lazily yield the regular files matched by `patterns` under `root`.

    Literal paths must exist; a glob that matches nothing yields nothing.
    """
    for pat in patterns:
        base, rest = split_glob(pat)
        base = root / base
        if rest is None:
            if not base.is_file():
                raise FileNotFoundError(f"Source file not found: {base}")
            yield File(
                base=base.parent, relative=Path(base.name), contents=base.read_bytes()
            )
            continue
        matched = sorted(p for p in base.glob(rest) if p.is_file())
        if not matched:
            log.warning("No files matched %s", base / rest)
        for p in matched:
            yield File(
                base=base, relative=p.relative_to(base), contents=p.read_bytes()
            )


def dest(files: Iterable[File], directory: Path) -> list[Path]:
    """Write files under `directory`, overwriting existing ones.

    Returns the written paths.
    """
    written: list[Path] = []
    for f in files:
        target = directory / f.relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(f.contents)
        written.append(target)
    return written
