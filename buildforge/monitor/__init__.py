"""Terminal reporting for plans, versions and build time reports."""

from buildforge.monitor.renderer import BuildRenderer

__all__ = ["BuildRenderer"]
