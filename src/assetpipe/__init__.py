"""Front-end asset pipeline.

Provides pipeline and composite task primitives, a task registry and a
sequential runner, the transform steps the frontend build uses, and a Typer CLI.
"""

from .core import CompositeTask, PipelineTask, Registry, Runner, composite, task
from .errors import (
    AssetPipeError,
    DuplicateTaskError,
    TaskCycleError,
    TransformError,
    UnknownTaskError,
)

__all__ = [
    "CompositeTask",
    "PipelineTask",
    "Registry",
    "Runner",
    "composite",
    "task",
    "AssetPipeError",
    "DuplicateTaskError",
    "TaskCycleError",
    "TransformError",
    "UnknownTaskError",
]
