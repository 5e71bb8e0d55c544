"""File helpers: glob expansion, directory cleaning, release copies.

The mutating helpers take ``dry_run``: when set they log what they would
do and leave the filesystem alone.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


def expand(
    root: Path,
    includes: Iterable[str],
    excludes: Iterable[str] = (),
) -> list[Path]:
    """Return files under *root* matching any include and no exclude.

    Patterns are root-relative globs (``Src/*Test/bin/Release/*Test.dll``).
    Results are sorted and de-duplicated.
    """
    excludes = list(excludes)
    found: set[Path] = set()
    for pattern in includes:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            relative = PurePosixPath(path.relative_to(root).as_posix())
            if any(relative.match(ex) for ex in excludes):
                continue
            found.add(path)
    return sorted(found)


def clean_dir(path: Path, *, dry_run: bool = False) -> None:
    """Delete everything inside *path*, creating it if missing."""
    if dry_run:
        logger.info("[dry-run] Would clean %s", path)
        return
    if path.exists():
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        logger.info("Cleaned %s", path)
    else:
        path.mkdir(parents=True)
        logger.info("Created %s", path)


def copy_files(
    files: Iterable[Path],
    destination: Path,
    *,
    dry_run: bool = False,
) -> list[Path]:
    """Copy *files* flat into *destination*; returns the target paths.

    Raises ``FileNotFoundError`` for a missing source, in a dry run too.
    """
    if not dry_run:
        destination.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for source in files:
        if not source.is_file():
            raise FileNotFoundError(f"Release file not found: {source}")
        target = destination / source.name
        if not dry_run:
            shutil.copy2(source, target)
        copied.append(target)
    if dry_run:
        logger.info("[dry-run] Would copy %d file(s) to %s", len(copied), destination)
    else:
        logger.info("Copied %d file(s) to %s", len(copied), destination)
    return copied
