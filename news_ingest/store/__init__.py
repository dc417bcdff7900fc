"""Persistence backends for sources and news records."""

from .base import NewsStore
from .supabase_store import SupabaseNewsStore

__all__ = ["NewsStore", "SupabaseNewsStore"]
