"""Secret redaction for log output and error messages.

Feed access keys are passed to the package manager on its command line, so
the rendered command and any tool error text contain them verbatim. Every
string that leaves the process through logging or an exception message goes
through ``redact()`` first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

REDACTED = "PRIVATEKEY"


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every non-empty secret in *text* with ``PRIVATEKEY``."""
    # Longest first, so a secret containing another is replaced whole.
    for secret in sorted((s for s in secrets if s), key=len, reverse=True):
        text = text.replace(secret, REDACTED)
    return text


class RedactingFilter(logging.Filter):
    """Logging filter that scrubs registered secrets from every record.

    The record's message is rendered with its arguments, redacted, and the
    arguments are cleared so handlers format the already-scrubbed text.
    """

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets: set[str] = {s for s in secrets if s}

    def add_secret(self, secret: str) -> None:
        if secret:
            self._secrets.add(secret)

    @property
    def secrets(self) -> frozenset[str]:
        return frozenset(self._secrets)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        scrubbed = redact(message, self._secrets)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True
