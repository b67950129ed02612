"""Per-user fairness for the upcoming part of a queue.

Entries in ``[cursor, boundary)`` are *final*: their position is guaranteed.
Entries from ``boundary`` onwards are *deferred* and get promoted into the
final window in submission order, as long as their submitter holds fewer than
``quota`` final entries.  Promotion never demotes an entry that is already
final, so lowering the quota only affects entries that are still deferred.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import MutableSequence

from discord_jukebox.domain.music.entities import QueueEntry
from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


def settle_boundary(cursor: int, boundary: int, length: int) -> int:
    """Clamp *boundary* so the entry under the cursor is always final."""
    if cursor >= length:
        return length
    return max(boundary, cursor + 1)


def promote_deferred(
    entries: MutableSequence[QueueEntry],
    cursor: int,
    boundary: int,
    quota: int | None,
) -> int:
    """Promote eligible deferred entries in place and return the new boundary.

    A single ascending pass over the deferred tail: every entry whose submitter
    is below *quota* is moved to the boundary, which then grows by one.  An
    exhausted submitter does not block entries of other users behind them.
    """
    length = len(entries)
    boundary = settle_boundary(cursor, boundary, length)
    assert 0 <= cursor <= boundary <= length, (cursor, boundary, length)

    counts = Counter(entry.requested_by_id for entry in entries[cursor:boundary])

    promoted = 0
    for index in range(boundary, length):
        user_id = entries[index].requested_by_id
        if quota is not None and counts[user_id] >= quota:
            continue
        counts[user_id] += 1
        if index != boundary:
            entries.insert(boundary, entries.pop(index))
        boundary += 1
        promoted += 1

    if promoted:
        logger.debug(LogTemplates.QUEUE_PROMOTED, promoted, boundary)

    assert boundary <= len(entries)
    return boundary
