"""Errors raised while loading, parsing, or persisting golden files."""

from __future__ import annotations


class GoldenStoreError(Exception):
    """Base class for golden store failures."""


class NotFoundError(GoldenStoreError):
    """The golden file does not exist at the requested revision."""


class ParseError(GoldenStoreError):
    """Golden file content is not a well-formed record set."""


class RetrievalError(GoldenStoreError):
    """Baseline history or file content could not be retrieved."""


class WriteError(GoldenStoreError):
    """The golden file could not be written to disk."""
