# SQL schema for the VocabCoach record store

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- JSON records keyed by name (sessions, plans, logs, chapter word pools)
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_records_updated ON records (updated_at);
"""
