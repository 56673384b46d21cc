"""Exception types raised by termline."""

from __future__ import annotations


class TermlineError(Exception):
    """Base class for all termline errors."""


class ConfigError(TermlineError, ValueError):
    """Invalid configuration: unknown edit mode, action or key id."""


class Cancelled(TermlineError):
    """Raised by :meth:`termline.cancel.Cancellation.raise_if_cancelled`."""
