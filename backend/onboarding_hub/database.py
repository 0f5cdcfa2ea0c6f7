import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from onboarding_hub.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- CLIENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS clients (
    id         TEXT PRIMARY KEY,
    name       TEXT NOT NULL UNIQUE,
    app_url    TEXT,
    logo_url   TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_clients_created ON clients(created_at);

-- ============================================================
-- CLIENT DOCUMENTS (SOWs)
-- ============================================================
CREATE TABLE IF NOT EXISTS client_documents (
    id            TEXT PRIMARY KEY,
    client_id     TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    document_path TEXT NOT NULL UNIQUE,
    document_type TEXT NOT NULL CHECK(document_type IN ('sow','kickoff_material')),
    file_name     TEXT NOT NULL,
    file_size     INTEGER NOT NULL DEFAULT 0,
    file_type     TEXT NOT NULL DEFAULT 'application/octet-stream',
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_client_documents_client ON client_documents(client_id);

-- ============================================================
-- UNIVERSAL DOCUMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS universal_documents (
    id            TEXT PRIMARY KEY,
    document_path TEXT NOT NULL UNIQUE,
    file_name     TEXT NOT NULL,
    file_size     INTEGER NOT NULL DEFAULT 0,
    file_type     TEXT NOT NULL DEFAULT 'application/octet-stream',
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- ONBOARDING STEPS
-- ============================================================
CREATE TABLE IF NOT EXISTS onboarding_steps (
    id             TEXT PRIMARY KEY,
    client_id      TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    title          TEXT NOT NULL,
    description    TEXT,
    status         TEXT NOT NULL DEFAULT 'not_started'
                   CHECK(status IN ('not_started','in_progress','completed','on_hold')),
    start_date     TEXT,
    end_date       TEXT,
    order_index    INTEGER NOT NULL DEFAULT 0,
    client_visible INTEGER NOT NULL DEFAULT 1,
    internal_notes TEXT,
    assigned_to    TEXT,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_steps_client_order ON onboarding_steps(client_id, order_index);
CREATE INDEX IF NOT EXISTS idx_steps_status ON onboarding_steps(status);

-- ============================================================
-- CLIENT ENGAGEMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS client_engagements (
    id              TEXT PRIMARY KEY,
    client_id       TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    status          TEXT NOT NULL DEFAULT 'draft'
                    CHECK(status IN ('draft','sent','in_progress','completed','on_hold')),
    email_sent_at   TEXT,
    client_email    TEXT,
    welcome_message TEXT,
    created_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_engagements_client ON client_engagements(client_id);
CREATE INDEX IF NOT EXISTS idx_engagements_status ON client_engagements(status);

-- ============================================================
-- RISKS
-- ============================================================
CREATE TABLE IF NOT EXISTS risks (
    id              TEXT PRIMARY KEY,
    client_id       TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    title           TEXT NOT NULL,
    description     TEXT,
    severity        TEXT NOT NULL DEFAULT 'medium'
                    CHECK(severity IN ('low','medium','high','critical')),
    likelihood      TEXT NOT NULL DEFAULT 'medium'
                    CHECK(likelihood IN ('low','medium','high')),
    impact          TEXT,
    mitigation_plan TEXT,
    status          TEXT NOT NULL DEFAULT 'open'
                    CHECK(status IN ('open','in_progress','mitigated','closed')),
    assigned_to     TEXT,
    due_date        TEXT,
    created_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_risks_client ON risks(client_id);
CREATE INDEX IF NOT EXISTS idx_risks_status ON risks(status);

-- ============================================================
-- CLIENT DELIVERABLES
-- ============================================================
CREATE TABLE IF NOT EXISTS client_deliverables (
    id             TEXT PRIMARY KEY,
    client_id      TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    milestone_name TEXT NOT NULL,
    title          TEXT NOT NULL,
    description    TEXT,
    document_path  TEXT NOT NULL UNIQUE,
    file_name      TEXT NOT NULL,
    file_size      INTEGER NOT NULL DEFAULT 0,
    file_type      TEXT NOT NULL DEFAULT 'application/octet-stream',
    version        TEXT NOT NULL DEFAULT '1.0',
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_deliverables_client_milestone ON client_deliverables(client_id, milestone_name);

-- ============================================================
-- SIGNATURE REQUESTS
-- ============================================================
CREATE TABLE IF NOT EXISTS signature_requests (
    id                     TEXT PRIMARY KEY,
    client_id              TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    sow_document_id        TEXT REFERENCES client_documents(id) ON DELETE SET NULL,
    nda_document_id        TEXT REFERENCES universal_documents(id) ON DELETE SET NULL,
    recipient_name         TEXT NOT NULL,
    recipient_email        TEXT NOT NULL,
    status                 TEXT NOT NULL DEFAULT 'draft'
                           CHECK(status IN ('draft','sent','viewed','signed','declined','voided')),
    external_request_id    TEXT,
    signing_url            TEXT UNIQUE,
    signed_document_url    TEXT,
    signer_typed_signature TEXT,
    signer_entity_name     TEXT,
    signer_title           TEXT,
    signed_at              TEXT,
    created_at             TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at             TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_signature_requests_client ON signature_requests(client_id);
"""


# Schema changes for databases created by earlier releases. SCHEMA_SQL
# already reflects the current layout, so fresh databases need none.
MIGRATIONS: list[str] = []


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # column already exists
    conn.close()
