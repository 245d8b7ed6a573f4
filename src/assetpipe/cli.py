from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

import typer
import yaml

from .core import CompositeTask, PipelineTask, Registry, Runner
from .errors import AssetPipeError
from .logging import get_logger


app = typer.Typer(add_completion=False, help="Front-end asset pipeline CLI")
log = get_logger("assetpipe.cli")

TASKS_PACKAGE = "assetpipe.tasks"


def load_config(path: str | Path) -> dict:
    p = Path(path)
    if not p.exists():
        log.debug("No config at %s, using defaults", p)
        return {}
    with open(p, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def discover_tasks(package: str = TASKS_PACKAGE) -> Registry:
    """Import all modules in the tasks package and register the tasks they declare."""
    registry = Registry()
    try:
        pkg = importlib.import_module(package)
    except ModuleNotFoundError:
        log.warning("No tasks package found: %s", package)
        return registry
    seen: set[int] = set()
    for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{package}."):
        try:
            mod = importlib.import_module(m.name)
        except Exception as e:  # noqa: BLE001
            log.warning("Failed to import %s: %s", m.name, e)
            continue
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            spec = getattr(obj, "_task_spec", obj)
            if not isinstance(spec, (PipelineTask, CompositeTask)) or id(spec) in seen:
                continue
            seen.add(id(spec))
            registry.register(spec)
    return registry


@app.command("list")
def list_tasks():
    """List registered tasks."""
    registry = discover_tasks()
    if not registry:
        typer.echo("No tasks registered.")
        raise typer.Exit(code=0)
    typer.echo("Tasks:")
    for name in registry.names():
        spec = registry.get(name)
        if isinstance(spec, CompositeTask):
            typer.echo(f"- {name} → {', '.join(spec.deps)}")
        else:
            typer.echo(f"- {name}")


@app.command("run")
def run_task(
    name: str = typer.Argument("default", help="Task name to run"),
    config: str = typer.Option("assets.yaml", help="Path to YAML config"),
):
    """Run a task and its dependencies."""
    params = load_config(config)
    try:
        registry = discover_tasks()
        report = Runner(registry, params).run(name)
    except (AssetPipeError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    for result in report.results:
        typer.echo(f"{result.name}: {result.status} ({len(result.written)} file(s))")


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
