"""Enqueue Application Service - resolves references and appends the tracks."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import ExecutionError, UsageError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ..interfaces.track_resolver import Requester, TrackResolver
    from .guild_registry import GuildRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnqueueRequest:
    """One reference typed by a user, optionally with a comment."""

    reference: str
    comment: str | None = None


@dataclass
class EnqueueResult:
    """Summary of an enqueue command."""

    enqueued: int = 0
    notices: list[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.notices)


class EnqueueService:
    """Resolves references outside the guild lock, then appends under it."""

    def __init__(self, *, resolver: TrackResolver, registry: GuildRegistry) -> None:
        self._resolver = resolver
        self._registry = registry

    async def resolve(
        self, requests: Sequence[EnqueueRequest], requester: Requester
    ) -> tuple[list[Track], list[str]]:
        tracks: list[Track] = []
        notices: list[str] = []

        for request in requests:
            results = await self._resolver.resolve(request.reference, request.comment, requester)
            if results is None:
                notices.append(ErrorMessages.UNSUPPORTED_REFERENCE.format(reference=request.reference))
                continue

            for result in results:
                if result.track is not None:
                    tracks.append(result.track)
                else:
                    logger.info(LogTemplates.RESOLVER_ITEM_FAILED, request.reference, result.error)
                    notices.append(str(result.error))

        return tracks, notices

    async def enqueue(
        self,
        guild_id: DiscordSnowflake,
        requests: Sequence[EnqueueRequest],
        requester: Requester,
    ) -> EnqueueResult:
        """Resolve *requests* and append every resolved track to the guild's queue.

        Raises:
            UsageError: If *requests* is empty.
            ExecutionError: If not a single track could be resolved; the message
                lists the reason for every failed item.
        """
        if not requests:
            raise UsageError(ErrorMessages.MISSING_TRACK_REFERENCE, topic="+")

        tracks, notices = await self.resolve(requests, requester)
        if not tracks:
            raise ExecutionError("\n".join(notices) or ErrorMessages.NO_TRACKS_MATCHED)

        handle = await self._registry.get(guild_id)
        async with handle.locked() as player:
            await player.extend(tracks)

        logger.info(LogTemplates.ENQUEUE_COMPLETED, len(tracks), len(notices), guild_id)
        return EnqueueResult(enqueued=len(tracks), notices=notices)
