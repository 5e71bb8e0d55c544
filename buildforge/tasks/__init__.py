"""Target bodies' building blocks: thin wrappers over external tools.

Every wrapper takes a ``BuildContext`` and goes through its ``ToolInvoker``,
so the whole pipeline can run against ``DryRunInvoker``.
"""

from buildforge.tasks.context import BuildContext

__all__ = ["BuildContext"]
