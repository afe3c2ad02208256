"""
Supabase client singleton for the AgroConnect backend.
SupabaseOrderBackend writes checked-out orders through it and polls their
statuses for the lifecycle task. Created on first use so the local backend
needs no Supabase settings.
"""
from supabase import create_client, Client

from config import SUPABASE_URL, SUPABASE_KEY

_client: Client = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY/SUPABASE_ANON_KEY must be set")
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _client
