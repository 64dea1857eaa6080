"""
Unit tests for the database migrations (activity log table).
Runs Alembic through Flask-Migrate against a throwaway SQLite file.
"""
import os
import tempfile
import unittest

import sqlalchemy as sa
from flask_migrate import downgrade, upgrade

from app import create_app, db
from app.models import LogEntry

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "migrations")
)


class TestMigrations(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self.tmpdir.name, "test.db")
        self.app = create_app({
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
        })

    def tearDown(self):
        with self.app.app_context():
            db.engine.dispose()
        self.tmpdir.cleanup()

    def test_upgrade_creates_log_entry_table_matching_model(self):
        with self.app.app_context():
            upgrade(directory=MIGRATIONS_DIR)
            inspector = sa.inspect(db.engine)
            self.assertIn("log_entry", inspector.get_table_names())
            columns = {c["name"] for c in inspector.get_columns("log_entry")}
            self.assertEqual(columns, set(LogEntry.__table__.columns.keys()))

    def test_downgrade_to_base_drops_table(self):
        with self.app.app_context():
            upgrade(directory=MIGRATIONS_DIR)
            downgrade(directory=MIGRATIONS_DIR, revision="base")
            self.assertNotIn("log_entry", sa.inspect(db.engine).get_table_names())

    def test_visit_log_works_on_migrated_schema(self):
        with self.app.app_context():
            upgrade(directory=MIGRATIONS_DIR)
        client = self.app.test_client()
        r = client.get("/calculator/")
        self.assertEqual(r.status_code, 200)
        with self.app.app_context():
            self.assertEqual(LogEntry.query.count(), 1)


if __name__ == "__main__":
    unittest.main()
