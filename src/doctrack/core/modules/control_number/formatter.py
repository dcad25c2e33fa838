"""Textual control numbers: PREFIX-{SECTION|MC}-YYMMDD-NN.

The trailing numeric group is parsed back by the validator and the counter
repair, so any change to this layout breaks both.
"""

import re

OFFICE_CODE = "MC"

SEQUENCE_SUFFIX_RE = re.compile(r"-(\d+)$")


def short_date(date_received: str) -> str:
    """2026-02-18 -> 260218."""
    return date_received.replace("-", "")[2:]


def format_control_number(prefix: str, section: str | None, date_received: str, sequence: int) -> str:
    """Render a control number; a None section renders the office-wide code."""
    code = section or OFFICE_CODE
    return f"{prefix}-{code}-{short_date(date_received)}-{sequence:02d}"


def parse_sequence(control_number: str | None) -> int | None:
    """Extract the sequence from the trailing -NN group, or None if there is none.

    Only used for records stored before sequences were kept as integers.
    """
    if not control_number:
        return None
    match = SEQUENCE_SUFFIX_RE.search(control_number)
    if match is None:
        return None
    return int(match.group(1))
