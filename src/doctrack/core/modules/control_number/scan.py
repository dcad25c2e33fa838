"""Pure scans over a partition's records: highest sequence, duplicates and gaps."""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from doctrack.core.modules.control_number.models import DuplicateControlNumber
from doctrack.core.modules.counter.models import CounterScope
from doctrack.core.modules.record.models import Record


def highest_sequence(records: Iterable[Record], scope: CounterScope) -> int:
    """Highest sequence number present in the scope, 0 if there is none."""
    sequences = [seq for record in records if (seq := record.sequence(scope)) is not None]
    return max(sequences, default=0)


def find_duplicates(records: Iterable[Record], scope: CounterScope) -> list[DuplicateControlNumber]:
    """Group records by their literal control number; report every string held by more than one record."""
    ids_by_number: dict[str, list[UUID]] = defaultdict(list)
    for record in records:
        control_number = record.control_number(scope)
        if control_number:
            ids_by_number[control_number].append(record.id)

    return [
        DuplicateControlNumber(control_number=control_number, type=scope, ids=ids)
        for control_number, ids in ids_by_number.items()
        if len(ids) > 1
    ]


def find_missing_sequences(records: Iterable[Record], scope: CounterScope) -> list[int]:
    """Every integer strictly between adjacent distinct sequences, ascending.

    Numbers below the lowest present sequence are not reported.
    """
    present = sorted({seq for record in records if (seq := record.sequence(scope)) is not None})
    missing: list[int] = []
    for low, high in zip(present, present[1:], strict=False):
        missing.extend(range(low + 1, high))
    return missing
