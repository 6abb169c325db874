"""
Tests for the in-memory claim session store.
"""
from datetime import datetime, timedelta

from claimassist.services.session_store import InMemorySessionStore


class TestInMemorySessionStore:
    def test_set_get_delete(self):
        store = InMemorySessionStore()
        store.set("CLM-1", {"step": "upload"})
        assert store.get("CLM-1") == {"step": "upload"}
        assert store.delete("CLM-1") is True
        assert store.get("CLM-1") is None
        assert store.delete("CLM-1") is False

    def test_expired_sessions_dropped(self):
        store = InMemorySessionStore()
        store.set("CLM-1", {"step": "upload"})
        store.set("CLM-2", {"step": "review"})
        store._expiry["CLM-1"] = datetime.utcnow() - timedelta(seconds=1)
        assert store.get("CLM-1") is None
        assert store.get("CLM-2") == {"step": "review"}
        assert store.delete("CLM-1") is False

    def test_ttl_applied(self):
        store = InMemorySessionStore()
        before = datetime.utcnow()
        store.set("CLM-1", {"step": "upload"}, ttl_hours=2)
        assert store._expiry["CLM-1"] >= before + timedelta(hours=2)
