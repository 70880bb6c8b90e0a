"""Slot label helpers.

A doctor's recurring availability is stored as a list of labels such as
``"09:00"`` or ``"09:00-10:00"``. Only the start of a label takes part in
scheduling: a slot is an atomic unit identified by its start time.
"""

from datetime import datetime, time

SLOT_LABEL_FORMAT = '%H:%M'
SLOT_RANGE_SEPARATOR = '-'


def parse_slot_start(label: str) -> time | None:
    start = label.split(SLOT_RANGE_SEPARATOR, 1)[0].strip()
    try:
        return datetime.strptime(start, SLOT_LABEL_FORMAT).time()
    except ValueError:
        return None


def label_for(moment: datetime | time) -> str:
    return moment.strftime(SLOT_LABEL_FORMAT)


def slot_start_label(label: str) -> str | None:
    start = parse_slot_start(label)
    if start is None:
        return None
    return label_for(start)


def sort_slot_labels(labels: list[str]) -> list[str]:
    # Unparseable labels sort last, in their own lexical order.
    def sort_key(label: str) -> tuple[int, time, str]:
        start = parse_slot_start(label)
        if start is None:
            return (1, time.min, label)
        return (0, start, label)

    return sorted(labels, key=sort_key)
