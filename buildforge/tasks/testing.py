"""Test runner invocations: xUnit 2, NUnit 2 and NUnit 3 consoles.

The runners manage their own worker threads; the build only chooses the
parallelization mode and an optional thread cap.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from buildforge.core.tool_invoker import check_invoke
from buildforge.tasks.context import BuildContext

logger = logging.getLogger(__name__)

NUNIT2_RESULT_FILE = "NUnit2TestResult.xml"
NUNIT3_RESULT_SPEC = "NUnit3TestResult.xml;format=nunit2"


def xunit_args(
    assemblies: Sequence[Path],
    *,
    parallel: bool,
    max_threads: int = 0,
) -> list[str]:
    """Return xUnit console arguments; ``max_threads=0`` keeps the default."""
    if max_threads < 0:
        raise ValueError(f"max_threads must be >= 0, got {max_threads}")
    args = [str(a) for a in assemblies]
    args += ["-parallel", "all" if parallel else "none"]
    if max_threads > 0:
        args += ["-maxthreads", str(max_threads)]
    return args


def run_xunit(context: BuildContext, assemblies: Sequence[Path]) -> None:
    if not assemblies:
        logger.warning("No xUnit test assemblies found; skipping")
        return
    settings = context.settings
    args = xunit_args(
        assemblies,
        parallel=settings.parallelize_tests,
        max_threads=settings.max_parallel_threads,
    )
    logger.info("xUnit: %d assembly(ies)", len(assemblies))
    check_invoke(context.invoker, settings.xunit_path, args)


def run_nunit2(context: BuildContext, assemblies: Sequence[Path]) -> None:
    if not assemblies:
        logger.warning("No NUnit 2 test assemblies found; skipping")
        return
    args = [*(str(a) for a in assemblies), "/nologo", f"/xml:{NUNIT2_RESULT_FILE}"]
    logger.info("NUnit 2: %d assembly(ies)", len(assemblies))
    check_invoke(context.invoker, context.settings.nunit2_path, args)


def run_nunit3(context: BuildContext, assemblies: Sequence[Path]) -> None:
    if not assemblies:
        logger.warning("No NUnit 3 test assemblies found; skipping")
        return
    args = [*(str(a) for a in assemblies), f"--result={NUNIT3_RESULT_SPEC}"]
    logger.info("NUnit 3: %d assembly(ies)", len(assemblies))
    check_invoke(context.invoker, context.settings.nunit3_path, args)
