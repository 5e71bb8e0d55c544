"""Stamp version attributes into AssemblyInfo source files.

Handles the C#, F# and VB attribute spellings::

    [assembly: AssemblyVersion("1.0.0.0")]
    [<assembly: AssemblyFileVersion("1.0.0.0")>]
    <Assembly: AssemblyInformationalVersion("1.0.0")>

Only attributes already present in a file are rewritten; nothing is added.
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from buildforge.models.versioning import VersionDescriptor

logger = logging.getLogger(__name__)


def _attribute_pattern(attribute: str) -> re.Pattern[str]:
    return re.compile(rf'(\b{attribute}(?:Attribute)?\s*\(\s*")[^"]*(")')


_PATTERNS: dict[str, re.Pattern[str]] = {
    "AssemblyVersion": _attribute_pattern("AssemblyVersion"),
    "AssemblyFileVersion": _attribute_pattern("AssemblyFileVersion"),
    "AssemblyInformationalVersion": _attribute_pattern("AssemblyInformationalVersion"),
}


def patch_text(text: str, version: VersionDescriptor) -> str:
    """Return *text* with the three version attributes replaced."""
    values = {
        "AssemblyVersion": version.assembly_version,
        "AssemblyFileVersion": version.file_version,
        "AssemblyInformationalVersion": version.info_version,
    }
    for attribute, pattern in _PATTERNS.items():
        value = values[attribute]
        text = pattern.sub(lambda m: f"{m.group(1)}{value}{m.group(2)}", text)
    return text


def patch_files(
    files: Iterable[Path],
    version: VersionDescriptor,
    *,
    dry_run: bool = False,
) -> list[Path]:
    """Patch every file in place; returns the files that changed.

    A UTF-8 byte order mark is preserved.  With *dry_run* the files that
    would change are returned but none is written.
    """
    changed: list[Path] = []
    for path in files:
        raw = path.read_bytes()
        has_bom = raw.startswith(codecs.BOM_UTF8)
        text = raw.decode("utf-8-sig")
        patched = patch_text(text, version)
        if patched == text:
            continue
        changed.append(path)
        if dry_run:
            logger.debug("[dry-run] Would patch %s", path)
            continue
        data = patched.encode("utf-8")
        path.write_bytes(codecs.BOM_UTF8 + data if has_bom else data)
        logger.debug("Patched %s", path)

    logger.info(
        "%s %d file(s): assembly=%s file=%s info=%s",
        "[dry-run] Would patch" if dry_run else "Patched",
        len(changed),
        version.assembly_version,
        version.file_version,
        version.info_version,
    )
    return changed
