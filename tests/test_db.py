import pytest

import db
from services.order_backend import SupabaseOrderBackend


def test_supabase_client_requires_settings(monkeypatch):
    monkeypatch.setattr(db, "_client", None)
    monkeypatch.setattr(db, "SUPABASE_URL", "")

    with pytest.raises(RuntimeError):
        db.get_supabase()


def test_backend_defers_client_creation(monkeypatch):
    monkeypatch.setattr(db, "_client", None)
    monkeypatch.setattr(db, "SUPABASE_URL", "")

    backend = SupabaseOrderBackend()

    assert backend._client_factory is db.get_supabase
