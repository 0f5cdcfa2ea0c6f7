import sqlite3

from onboarding_hub.database import MIGRATIONS, init_db


def _columns(db_path, table):
    conn = sqlite3.connect(str(db_path))
    try:
        return [row[1] for row in conn.execute(f"PRAGMA table_info({table})")]
    finally:
        conn.close()


class TestInitDb:
    def test_fresh_schema_has_signer_columns(self, tmp_path):
        db_path = tmp_path / "db.sqlite"
        init_db(db_path)
        columns = _columns(db_path, "signature_requests")
        assert "signer_entity_name" in columns
        assert "signer_title" in columns

    def test_schema_is_the_only_source_of_columns(self):
        assert MIGRATIONS == []

    def test_init_twice_is_harmless(self, tmp_path):
        db_path = tmp_path / "nested" / "db.sqlite"
        init_db(db_path)
        before = _columns(db_path, "signature_requests")
        init_db(db_path)
        assert _columns(db_path, "signature_requests") == before
        assert before.count("signer_title") == 1
