"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when
their str() representation is empty.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

from ..errors import CycleDetectedError
from ..errors import DirectiveSyntaxError
from ..errors import InvalidConfigurationError
from ..errors import UnresolvedDependencyError

# Hints shown under resolution failures; these indicate broken declarations,
# so retrying never helps
HINTS: dict[type, str] = {
    UnresolvedDependencyError: "Check the require directive and the configured search paths (sprockets paths).",
    CycleDetectedError: "Remove one of the require directives in the chain.",
    DirectiveSyntaxError: 'Use //= require "name" or //= require <origin:path>.',
    InvalidConfigurationError: "Check .sprockets/settings.yaml and command line options.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'

        >>> format_error_message(TimeoutError())
        'TimeoutError: (no additional details)'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    return f"{error_type}: (no additional details)"


def error_hint(e: BaseException) -> str | None:
    """Suggested fix for a known error type, if any."""
    for exc_type, hint in HINTS.items():
        if isinstance(e, exc_type):
            return hint
    return None


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Script paths such as "[vendor]/x.js" would otherwise be read as markup.
    """
    return _escape_markup(str(value))
