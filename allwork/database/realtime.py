import logging
from typing import Any, Callable, Dict, Optional

from supabase import AsyncClient

from allwork.config import settings
from allwork.database.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class TaskChangeFeed:
    """Supabase Realtime subscription for postgres changes on the tasks table of one team."""

    def __init__(self, client: Optional[AsyncClient] = None):
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = await SupabaseClient.get_async_client()
        return self._client

    async def subscribe(self, team_id: int, callback: Callable[[Dict[str, Any]], None]):
        """Open a channel that calls `callback` on any insert/update/delete of the team's tasks."""
        client = await self._get_client()
        channel = client.channel(f"{settings.realtime_channel_prefix}-{team_id}")
        channel.on_postgres_changes(
            "*",
            schema="public",
            table="tasks",
            filter=f"team_id=eq.{team_id}",
            callback=callback,
        )
        await channel.subscribe()
        logger.info(f"Subscribed to task changes for team {team_id}")
        return channel

    async def unsubscribe(self, channel) -> None:
        client = await self._get_client()
        await client.remove_channel(channel)
        logger.info("Realtime channel removed")
