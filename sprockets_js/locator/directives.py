"""Require directive parsing - pure text processing, no I/O.

Directives live in comments and name the scripts a file depends on:

    //= require "utils"            bare name, looked up on the search path
    //= require <app:widgets/menu> explicit origin:path reference
    /*= require "cookies" */
     *= require "strftime"         (inside a block comment)
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from posixpath import normpath
from re import Pattern

from ..errors import DirectiveSyntaxError
from ..models import DependencyReference

logger = logging.getLogger(__name__)

# Comment marker, "=", then the require keyword and its argument. A trailing
# "// comment" must be separated from the argument by whitespace.
DIRECTIVE_PATTERN: Pattern = re.compile(
    r"^\s*(?://|/\*+|\*|#)=\s*require\b\s*(?P<arg>.*?)\s*(?:\*/)?(?:\s+//.*)?\s*$"
)

# "name"
BARE_PATTERN: Pattern = re.compile(r'^"(?P<path>[^"<>]+)"$')

# <origin:path>
EXPLICIT_PATTERN: Pattern = re.compile(r"^<(?P<origin>[A-Za-z0-9_.\-]+):(?P<path>[^<>\"]+)>$")

SCRIPT_SUFFIX = ".js"


class ScanPolicy(Enum):
    """Where in a file directives are recognized."""

    HEADER = "header"  # stop at the first line of code
    WHOLE_FILE = "whole_file"


DEFAULT_SCAN_POLICY = ScanPolicy.HEADER


def normalize_script_path(path: str) -> str:
    """Collapse a logical script path and append the .js suffix when missing.

    "./utils", "lib//utils" and "x/../utils" all name the same script, so they
    must produce the same identity.

    Examples:
        >>> normalize_script_path("utils")
        'utils.js'
        >>> normalize_script_path("./lib//cookies.js")
        'lib/cookies.js'

    Raises:
        ValueError: The path is empty or climbs above its search location
    """
    path = path.strip().lstrip("/")
    if path:
        path = normpath(path)
    if path in ("", ".", "..") or path.startswith("../"):
        raise ValueError(f"Script path escapes its search location: {path!r}")
    if not path.endswith(SCRIPT_SUFFIX):
        path += SCRIPT_SUFFIX
    return path


class DirectiveParser:
    """Extracts require directives from script content, in file order."""

    def __init__(self, scan_policy: ScanPolicy = DEFAULT_SCAN_POLICY):
        self.scan_policy = scan_policy

    def parse(self, content: bytes | str, source: str | None = None) -> list[DependencyReference]:
        """Parse require directives.

        Args:
            content: Script bytes (UTF-8) or text
            source: Name of the script, for error messages

        Returns:
            Dependency references in the order they appear

        Raises:
            DirectiveSyntaxError: A require directive matches neither form
        """
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig")
        elif content.startswith("\ufeff"):
            content = content[1:]

        references: list[DependencyReference] = []
        in_block = False

        for line_number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()

            match = DIRECTIVE_PATTERN.match(line)
            if match:
                references.append(self._parse_argument(match.group("arg"), line_number, line, source))
            elif self.scan_policy is ScanPolicy.HEADER and not in_block and not self._is_comment(stripped):
                break

            in_block = self._still_in_block(stripped, in_block)

        if references:
            logger.debug(f"Parsed {len(references)} directives from {source or 'script'}")
        return references

    def _parse_argument(self, arg: str, line_number: int, line: str, source: str | None) -> DependencyReference:
        match = BARE_PATTERN.match(arg) or EXPLICIT_PATTERN.match(arg)
        if match is None:
            raise DirectiveSyntaxError(line_number, line, source)

        try:
            path = normalize_script_path(match.group("path"))
        except ValueError as e:
            raise DirectiveSyntaxError(line_number, line, source) from e

        origin = match.groupdict().get("origin")
        return DependencyReference(path=path, origin=origin, line_number=line_number)

    @staticmethod
    def _is_comment(stripped: str) -> bool:
        """Blank lines and comment lines belong to the header."""
        return not stripped or stripped.startswith(("//", "/*", "*", "#"))

    @staticmethod
    def _still_in_block(stripped: str, in_block: bool) -> bool:
        """Track whether the next line is inside a /* ... */ comment."""
        if in_block:
            return "*/" not in stripped
        if stripped.startswith("/*"):
            return "*/" not in stripped[2:]
        return False
