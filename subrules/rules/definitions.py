"""
Reading rule definitions from text.

A rule line holds a name, an optional connector word and the rule text:

    hisFull means hisG and hisI and (hisA or hisF)
    active.1.0 if hisFull and not hisB
    likely 3 of {hisG, hisI, hisA, hisF}

Blank lines and lines starting with "#" are skipped.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from subrules.core.exceptions import RuleFileError
from subrules.core.models import RuleDefinition

RULE_PATTERN = re.compile(r"\s*(\S+)\s+(?:(?:means|if|is)\s+)?(.+)")
COMMENT_MARKER = "#"


def parse_definition_line(
    line: str, line_number: Optional[int] = None, source: Optional[str] = None
) -> Optional[RuleDefinition]:
    """
    Split one line into a rule name and rule text.

    Returns:
        RuleDefinition, or None for blank and comment lines

    Raises:
        RuleFileError: If the line has no rule text after the name
    """
    line = line.rstrip("\r\n")
    if not line.strip() or line.startswith(COMMENT_MARKER):
        return None
    m = RULE_PATTERN.fullmatch(line)
    if m is None:
        raise RuleFileError(line, line_number, source)
    return RuleDefinition(name=m.group(1), text=m.group(2).strip(), line_number=line_number)


def read_definitions(lines: Iterable[str], source: Optional[str] = None) -> Iterator[RuleDefinition]:
    """Yield the rule definitions in a sequence of lines, in order."""
    for i, line in enumerate(lines, start=1):
        definition = parse_definition_line(line, i, source)
        if definition is not None:
            yield definition


def load_definitions(path: Union[str, Path]) -> list[RuleDefinition]:
    """Read all the rule definitions in a file. A missing file has none."""
    path = Path(path)
    if not path.exists():
        return []
    with path.open() as f:
        return list(read_definitions(f, source=str(path)))


__all__ = [
    "RULE_PATTERN",
    "parse_definition_line",
    "read_definitions",
    "load_definitions",
]
