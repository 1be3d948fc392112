# src/regparse_kit/errors.py

"""Exception types raised across regparse-kit.

The recovery parser never raises. A failed recovery is reported through
``RecoveryResult.is_failure``.
"""


class RegParseError(Exception):
    """Base class for regparse-kit errors."""


class ChunkingError(RegParseError):
    """Splitting a document into chunks failed. Fatal for the document."""


class ExtractionError(RegParseError):
    """A single extraction step failed.

    Non-fatal: the extractor keeps its buffer and continues on the next
    fragment.
    """


class ModelStreamError(RegParseError):
    """The upstream model call failed (network, auth, quota, protocol).

    Fatal for the document. Transport retries, if any, already happened in
    the client layer.
    """


class DocumentReadError(RegParseError):
    """A source document could not be opened or decoded."""
