from supabase import create_client, acreate_client, Client, AsyncClient
from allwork.config import settings


class SupabaseClient:
    _client: Client = None
    _async_client: AsyncClient = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    async def get_async_client(cls) -> AsyncClient:
        """Async client; the realtime socket is only available on this one."""
        if cls._async_client is None:
            cls._async_client = await acreate_client(settings.supabase_url, settings.supabase_key)
        return cls._async_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._async_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()
