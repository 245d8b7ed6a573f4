from __future__ import annotations

from pathlib import Path


class AssetPipeError(Exception):
    """Base class for task graph failures."""


class DuplicateTaskError(AssetPipeError):
    def __init__(self, name: str):
        super().__init__(f"Task already registered: {name}")
        self.name = name


class UnknownTaskError(AssetPipeError):
    def __init__(self, name: str, required_by: str | None = None):
        msg = f"Unknown task: {name}"
        if required_by:
            msg += f" (required by {required_by})"
        super().__init__(msg)
        self.name = name
        self.required_by = required_by


class TaskCycleError(AssetPipeError):
    def __init__(self, chain: list[str]):
        super().__init__("Cycle detected in task graph: " + " -> ".join(chain))
        self.chain = chain


class TransformError(AssetPipeError):
    """A transform step failed on a file."""

    def __init__(self, step: str, path: Path | str | None, message: str):
        where = f" [{path}]" if path else ""
        super().__init__(f"{step}{where}: {message}")
        self.step = step
        self.path = path
        self.message = message
