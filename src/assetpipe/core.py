from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Union

from . import fileset
from .errors import (
    DuplicateTaskError,
    TaskCycleError,
    TransformError,
    UnknownTaskError,
)
from .logging import get_logger
from .transforms import Step
from .utils import project_root


# Allow static values or callables that build them from params
PathSpec = Union[List[str], Callable[[dict], List[str]]]
DestSpec = Union[str, Callable[[dict], str]]
StepSpec = Union[List[Step], Callable[[dict], List[Step]]]


@dataclass(frozen=True)
class PipelineTask:
    name: str
    src: PathSpec
    dest: DestSpec
    steps: StepSpec


@dataclass(frozen=True)
class CompositeTask:
    name: str
    deps: tuple[str, ...]


TaskSpec = Union[PipelineTask, CompositeTask]


def task(name: str, src: PathSpec, dest: DestSpec):
    """Decorator to declare a pipeline task on a function.

    The wrapped function receives the parsed config `params` and returns the
    ordered list of transform steps to apply between `src` and `dest`.
    """

    def deco(fn: Callable[[dict], List[Step]]):
        spec = PipelineTask(name=name, src=src, dest=dest, steps=fn)
        setattr(fn, "_task_spec", spec)
        return fn

    return deco


def composite(name: str, deps: List[str]) -> CompositeTask:
    """Declare a task that only runs other tasks, in the listed order."""
    return CompositeTask(name=name, deps=tuple(deps))


class Registry:
    def __init__(self) -> None:
        self._tasks: dict[str, TaskSpec] = {}

    def register(self, spec: TaskSpec) -> None:
        if spec.name in self._tasks:
            raise DuplicateTaskError(spec.name)
        self._tasks[spec.name] = spec

    def get(self, name: str) -> TaskSpec:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def names(self) -> list[str]:
        return sorted(self._tasks)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)


@dataclass
class TaskResult:
    name: str
    status: str  # ok | handled (some files dropped by an error handler)
    written: list[Path] = field(default_factory=list)
    seconds: float = 0.0


@dataclass
class RunReport:
    target: str
    results: list[TaskResult] = field(default_factory=list)

    @property
    def handled(self) -> list[str]:
        return [r.name for r in self.results if r.status == "handled"]


class Runner:
    def __init__(self, registry: Registry, params: dict | None = None):
        self.registry = registry
        self.params = dict(params or {})
        self.root = project_root(self.params)
        self.logger = get_logger("assetpipe.runner")

    def plan(self, name: str) -> list[PipelineTask]:
        """Expand `name` into the pipeline tasks to execute, in order.

        Composites expand depth-first in listed order without deduplication.
        Unknown names and cycles fail here, before anything runs.
        """
        ordered: list[PipelineTask] = []
        self._expand(name, [], ordered)
        return ordered

    def _expand(self, name: str, stack: list[str], out: list[PipelineTask]) -> None:
        if name in stack:
            raise TaskCycleError(stack[stack.index(name):] + [name])
        if name not in self.registry:
            raise UnknownTaskError(name, required_by=stack[-1] if stack else None)
        spec = self.registry.get(name)
        if isinstance(spec, CompositeTask):
            for dep in spec.deps:
                self._expand(dep, stack + [name], out)
        else:
            out.append(spec)

    def run(self, name: str = "default") -> RunReport:
        selected = self.plan(name)
        self.logger.info(
            "Selected tasks for %s: %s",
            name,
            " → ".join(t.name for t in selected) or "(none)",
        )
        report = RunReport(target=name)
        for spec in selected:
            report.results.append(self.run_pipeline(spec))
        return report

    def run_pipeline(self, spec: PipelineTask) -> TaskResult:
        task_logger = get_logger(f"assetpipe.task.{spec.name}")
        started = time.perf_counter()
        task_logger.info("Run: %s", spec.name)

        patterns = _resolve(spec.src, self.params)
        dest_dir = self.root / _resolve(spec.dest, self.params)
        steps = _resolve(spec.steps, self.params)

        files = fileset.src(patterns, root=self.root)
        handled = False
        try:
            for step in steps:
                try:
                    files, failures = step.apply(files)
                except TransformError as err:
                    if step.on_error is None:
                        raise
                    # Whole-stream step: nothing survives it
                    files, failures = [], [err]
                for err in failures:
                    step.on_error(err)
                if failures:
                    handled = True
                    task_logger.warning(
                        "Step %s failed on %d file(s), dropped",
                        step.name,
                        len(failures),
                    )
            written = fileset.dest(files, dest_dir)
        except Exception:
            task_logger.exception("Task failed: %s", spec.name)
            raise
        elapsed = time.perf_counter() - started
        task_logger.info(
            "Done: %s (%d file(s) → %s, %.2fs)",
            spec.name,
            len(written),
            dest_dir,
            elapsed,
        )
        status = "handled" if handled else "ok"
        return TaskResult(spec.name, status, written=written, seconds=elapsed)


def _resolve(value, params: dict):
    """Resolve a static value or a callable(params) into a concrete value."""
    if callable(value):
        return value(params)
    return value
