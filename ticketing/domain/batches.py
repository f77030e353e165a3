"""Keeps the batch list in lockstep with the "number of batches" field."""

from ticketing.domain.models import TicketBatch

DEFAULT_BATCH_NAME = "Lote {number}"


def batch_template(number: int) -> TicketBatch:
    """Fresh batch row; ``number`` is 1-based."""
    return TicketBatch(name=DEFAULT_BATCH_NAME.format(number=number))


def sync_batches(batches: tuple[TicketBatch, ...], count: int) -> tuple[TicketBatch, ...]:
    """Resize ``batches`` to ``count`` entries.

    Existing rows are kept as they are. Growing appends templates named after
    their position; shrinking drops trailing rows whether or not they hold
    data (see populated_beyond to warn about that first).
    """
    count = max(count, 0)
    current = len(batches)
    if count > current:
        return batches + tuple(batch_template(n + 1) for n in range(current, count))
    return batches[:count]


def populated_beyond(batches: tuple[TicketBatch, ...], count: int) -> list[int]:
    """Indexes of rows holding data that a resize to ``count`` would drop."""
    return [i for i in range(max(count, 0), len(batches)) if batches[i].is_populated()]
