"""Transform steps applied to streams of in-memory files.

Each factory returns a `Step`: a named function from a list of files to a new
list of files. Compiler failures are raised as `TransformError`.
"""

from __future__ import annotations

import base64
import functools
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, Iterator

import dukpy
import sass as libsass

from .errors import TransformError
from .fileset import File
from .logging import get_logger


log = get_logger("assetpipe.transforms")

ErrorHandler = Callable[[TransformError], None]


@dataclass(frozen=True)
class Step:
    name: str
    fn: Callable[[list[File]], Iterable[File]]
    on_error: ErrorHandler | None = None
    # fn maps each file independently, so one failing file can be dropped alone
    per_file: bool = False

    def __call__(self, files: Iterable[File]) -> list[File]:
        return list(self.fn(list(files)))

    def apply(self, files: Iterable[File]) -> tuple[list[File], list[TransformError]]:
        """Run the step, collecting per-file failures when an error handler is set.

        Without a handler, or for steps that work on the whole stream, the
        first `TransformError` is raised.
        """
        files = list(files)
        if self.on_error is None or not self.per_file:
            return self(files), []
        out: list[File] = []
        failures: list[TransformError] = []
        for f in files:
            try:
                out.extend(self.fn([f]))
            except TransformError as err:
                failures.append(err)
        return out, failures

    def handle_errors(self, handler: ErrorHandler) -> "Step":
        """Return a copy whose failures go to `handler` instead of aborting the run."""
        return replace(self, on_error=handler)


def log_error(err: TransformError) -> None:
    log.error("%s", err)


def _text(step: str, f: File) -> str:
    try:
        return f.text
    except UnicodeDecodeError as e:
        raise TransformError(step, f.path, f"not valid UTF-8: {e}") from e


# --- source maps -----------------------------------------------------------


def sourcemaps_init() -> Step:
    def apply(files: list[File]) -> Iterator[File]:
        for f in files:
            source = f.relative.as_posix()
            yield f.derive(
                source_map={
                    "version": 3,
                    "file": source,
                    "names": [],
                    "mappings": "",
                    "sources": [source],
                    "sourcesContent": [_text("sourcemaps.init", f)],
                }
            )

    return Step("sourcemaps.init", apply, per_file=True)


def sourcemaps_write(dest: str | None = None) -> Step:
    """Emit each file's map inline, or as `<file>.map` under `dest`.

    `dest` is relative to the file base.
    """

    def apply(files: list[File]) -> Iterator[File]:
        for f in files:
            if f.source_map is None:
                yield f
                continue
            smap = dict(f.source_map, file=f.relative.name)
            data = json.dumps(smap).encode("utf-8")
            if dest is None:
                url = "data:application/json;charset=utf8;base64," + base64.b64encode(
                    data
                ).decode("ascii")
                yield f.derive(
                    contents=f.contents + _mapping_comment(f, url), source_map=None
                )
                continue
            map_rel = PurePosixPath(
                os.path.normpath(os.path.join(dest, f.relative.as_posix() + ".map"))
            ).as_posix()
            url = PurePosixPath(
                os.path.relpath(map_rel, f.relative.parent.as_posix())
            ).as_posix()
            yield f.derive(
                contents=f.contents + _mapping_comment(f, url), source_map=None
            )
            yield File(base=f.base, relative=Path(map_rel), contents=data)

    return Step("sourcemaps.write", apply, per_file=True)


def _mapping_comment(f: File, url: str) -> bytes:
    if f.relative.suffix == ".css":
        return f"\n/*# sourceMappingURL={url} */\n".encode("utf-8")
    return f"\n//# sourceMappingURL={url}\n".encode("utf-8")


# --- javascript ------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def _babel_source() -> str:
    """Source of the Babel standalone build shipped inside dukpy."""
    modules = Path(dukpy.__file__).parent / "jsmodules"
    candidates = sorted(modules.glob("babel-*.min.js"))
    if not candidates:
        raise RuntimeError(f"No bundled Babel found in {modules}")
    return candidates[-1].read_text(encoding="utf-8")


def _babel(step: str, f: File, options: dict) -> tuple[str, dict | None]:
    opts = dict(options)
    opts["filename"] = f.relative.as_posix()
    if f.source_map is not None:
        opts["sourceMaps"] = True
        sources = f.source_map.get("sources") or [f.relative.as_posix()]
        opts["sourceFileName"] = sources[0]
        # An empty map carries no positions to compose through
        if f.source_map.get("mappings"):
            opts["inputSourceMap"] = f.source_map
    try:
        result = dukpy.evaljs(
            (
                _babel_source(),
                "var bres = Babel.transform(dukpy.es6code, dukpy.babel_options);",
                "res = {map: bres.map, code: bres.code};",
            ),
            es6code=_text(step, f),
            babel_options=opts,
        )
    except dukpy.JSRuntimeError as e:
        raise TransformError(step, f.path, str(e)) from e
    smap = result.get("map") if f.source_map is not None else None
    return result["code"], smap


def babel(presets: list[str] | None = None, **options) -> Step:
    """Transpile JSX/ES2015 to ES5 with Babel; `.jsx` and `.es6` become `.js`."""
    opts = dict(options, presets=list(presets or ["es2015"]))

    def apply(files: list[File]) -> Iterator[File]:
        for f in files:
            code, smap = _babel("babel", f, opts)
            relative = f.relative
            if relative.suffix in (".jsx", ".es6"):
                relative = relative.with_suffix(".js")
            yield f.derive(
                relative=relative, contents=code.encode("utf-8"), source_map=smap
            )

    return Step("babel", apply, per_file=True)


def minify() -> Step:
    opts = {
        "presets": ["es2015"],
        "minified": True,
        "compact": True,
        "comments": False,
    }

    def apply(files: list[File]) -> Iterator[File]:
        for f in files:
            code, smap = _babel("minify", f, opts)
            yield f.derive(contents=code.encode("utf-8"), source_map=smap)

    return Step("minify", apply, per_file=True)


def concat(filename: str, newline: str = "\n") -> Step:
    """Join all files into one; their maps become sections of an index map."""

    def apply(files: list[File]) -> list[File]:
        if not files:
            return []
        chunks: list[str] = []
        sections: list[dict] = []
        line = 0
        for f in files:
            text = _text("concat", f)
            if f.source_map is not None:
                sections.append(
                    {"offset": {"line": line, "column": 0}, "map": f.source_map}
                )
            chunks.append(text)
            line += text.count("\n") + newline.count("\n")
        smap: dict | None = None
        if len(files) == 1 and sections:
            smap = dict(sections[0]["map"], file=filename)
        elif sections:
            smap = {"version": 3, "file": filename, "sections": sections}
        first = files[0]
        joined = newline.join(chunks)
        return [
            File(
                base=first.base,
                relative=first.relative.parent / filename,
                contents=joined.encode("utf-8"),
                source_map=smap,
            )
        ]

    return Step("concat", apply)


# --- stylesheets -----------------------------------------------------------


def sass(
    include_paths: Iterable[str | Path] = (), output_style: str = "nested"
) -> Step:
    """Compile `.scss`/`.sass` files to `.css`. Partials (`_name.scss`) are skipped."""
    paths = [str(p) for p in include_paths]

    def apply(files: list[File]) -> Iterator[File]:
        for f in files:
            if f.relative.name.startswith("_"):
                continue
            try:
                css = libsass.compile(
                    string=_text("sass", f),
                    indented=f.relative.suffix == ".sass",
                    include_paths=[str(f.path.parent)] + paths,
                    output_style=output_style,
                )
            except libsass.CompileError as e:
                raise TransformError("sass", f.path, str(e)) from e
            yield f.derive(
                relative=f.relative.with_suffix(".css"), contents=css.encode("utf-8")
            )

    return Step("sass", apply, per_file=True)


def copy() -> Step:
    return Step("copy", lambda files: files, per_file=True)
