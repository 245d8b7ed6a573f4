"""Frontend build tasks live here.

Each module declares pipeline tasks with
`@assetpipe.task(name=..., src=[...], dest=...)` or aggregates with
`assetpipe.composite(name, [...])`. They are collected by
`assetpipe.cli.discover_tasks`.
"""
