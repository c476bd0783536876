"""
Input Resolution

Turns a caller-supplied locator into a binary stream:
- "-"            → standard input
- existing path  → the file's contents
- anything else  → the locator's own UTF-8 bytes (literal data)

The literal fallback means a mistyped filename becomes data instead of an
error. It is logged, and callers that want the error pass allow_literal=False.
"""

import io
import os
import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator

import structlog

from .exceptions import SourceReadError

logger = structlog.get_logger()

STDIN_LOCATOR = "-"


@contextmanager
def read_input(locator: str, allow_literal: bool = True) -> Iterator[BinaryIO]:
    """
    Yield a readable binary stream for a locator.

    Files are closed on exit; standard input is left open.

    Raises:
        SourceReadError: the path exists but cannot be opened, or the path
            does not exist and literal input is disabled.
    """
    if locator == STDIN_LOCATOR:
        yield sys.stdin.buffer
        return

    if os.path.exists(locator):
        try:
            stream = open(locator, "rb")
        except OSError as e:
            raise SourceReadError(locator, e.strerror or str(e)) from e
        with stream:
            yield stream
        return

    if not allow_literal:
        raise SourceReadError(locator, "no such file")

    logger.warning("input_treated_as_literal", length=len(locator))
    yield io.BytesIO(locator.encode("utf-8"))


def read_all(locator: str, allow_literal: bool = True) -> bytes:
    """Read a locator fully into memory."""
    with read_input(locator, allow_literal=allow_literal) as stream:
        try:
            return stream.read()
        except OSError as e:
            raise SourceReadError(locator, e.strerror or str(e)) from e
