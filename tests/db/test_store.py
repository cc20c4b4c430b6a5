import json

from db.manager import DatabaseManager, apply_pending_migrations, get_applied_migrations
from db.store import KeyValueStore, load_records, save_records


class TestKeyValueStore:
    """Tests for KeyValueStore."""

    def test_get_missing_key(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)

        assert store.get("accounts") is None

    def test_set_then_get(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)

        assert store.set("accounts", b"[1, 2]") is True
        assert store.get("accounts") == b"[1, 2]"

    def test_set_overwrites(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)

        store.set("transactions", b"old")
        store.set("transactions", b"new")

        assert store.get("transactions") == b"new"

    def test_keys_are_independent(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)

        store.set("accounts", b"a")
        store.set("categories", b"c")

        assert store.get("accounts") == b"a"
        assert store.get("categories") == b"c"

    def test_unavailable_storage_is_swallowed(self, broken_db_manager):
        store = KeyValueStore(broken_db_manager)

        assert store.get("accounts") is None
        assert store.set("accounts", b"[]") is False

    def test_unreachable_database_location_is_swallowed(self, unreachable_config):
        """Creating the database directory fails, reads and writes fail softly."""
        store = KeyValueStore(DatabaseManager(unreachable_config))

        assert store.get("accounts") is None
        assert store.set("accounts", b"[]") is False

    def test_missing_table_is_swallowed(self, bare_db_manager):
        """Before migrations run, reads and writes fail softly."""
        store = KeyValueStore(bare_db_manager)

        assert store.get("accounts") is None
        assert store.set("accounts", b"[]") is False


class TestRecords:
    """Tests for load_records and save_records."""

    def test_round_trip(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)
        records = [{"id": "nequi", "name": "Nequi ñ"}]

        assert save_records(store, "accounts", records) is True
        assert load_records(store, "accounts") == records

    def test_absent_key(self, db_manager_with_schema):
        assert load_records(KeyValueStore(db_manager_with_schema), "accounts") is None

    def test_corrupt_blob_is_ignored(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)
        store.set("accounts", b"{not json")

        assert load_records(store, "accounts") is None

    def test_non_list_blob_is_ignored(self, db_manager_with_schema):
        store = KeyValueStore(db_manager_with_schema)
        store.set("accounts", json.dumps({"id": "x"}).encode("utf-8"))

        assert load_records(store, "accounts") is None


class TestMigrations:
    """Tests for migration bookkeeping."""

    def test_migrations_recorded(self, db_manager_with_schema, test_db):
        assert "001_kv_store.sql" in get_applied_migrations(test_db)

    def test_apply_twice_is_a_no_op(self, db_manager_with_schema):
        assert apply_pending_migrations(db_manager_with_schema) == 0
