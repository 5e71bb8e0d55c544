"""Buildforge CLI: Typer-based command-line interface.

Provides the ``buildforge`` command with subcommands for running targets,
inspecting the execution plan, listing targets and resolving the version.

All output uses Rich for formatted terminal display.
"""
