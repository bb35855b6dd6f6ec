"""Alembic migrations against a throwaway SQLite file."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from adaptive_chat.config import get_settings

ALEMBIC_INI = Path(__file__).resolve().parents[1] / "alembic.ini"


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setattr(get_settings(), "database_url_override", f"sqlite:///{db_file}")
    config = Config(str(ALEMBIC_INI))

    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        tables = set(inspect(engine).get_table_names())
        assert {"users", "modes", "chats", "chat_messages"} <= tables
        chat_columns = {c["name"] for c in inspect(engine).get_columns("chats")}
        assert {"version", "is_pinned", "message_count"} <= chat_columns

        command.downgrade(config, "base")
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
