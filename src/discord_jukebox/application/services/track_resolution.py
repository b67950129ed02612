"""Track resolution chain - the first resolver that recognizes a reference wins."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates
from ..interfaces.track_resolver import TrackResolver

if TYPE_CHECKING:
    from ..interfaces.track_resolver import Requester, TrackResolution

logger = logging.getLogger(__name__)


class ResolverChain(TrackResolver):
    """Ordered set of resolvers consulted one after another."""

    def __init__(self, resolvers: Sequence[TrackResolver]) -> None:
        self._resolvers = tuple(resolvers)

    @property
    def resolvers(self) -> tuple[TrackResolver, ...]:
        return self._resolvers

    async def resolve(
        self, reference: str, comment: str | None, requester: Requester
    ) -> list[TrackResolution] | None:
        for resolver in self._resolvers:
            results = await resolver.resolve(reference, comment, requester)
            if results is not None:
                logger.debug(LogTemplates.RESOLVER_CLAIMED, type(resolver).__name__, reference)
                return results

        logger.debug(LogTemplates.RESOLVER_UNCLAIMED, reference)
        return None
