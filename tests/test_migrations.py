from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

ROOT = Path(__file__).resolve().parent.parent


def alembic_config(db_path):
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


def table_names(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_upgrade_and_downgrade(tmp_path):
    db_path = tmp_path / "migrated.db"
    config = alembic_config(db_path)

    command.upgrade(config, "head")
    assert {"gallery_items", "users", "sessions"} <= table_names(db_path)

    command.downgrade(config, "base")
    assert table_names(db_path) == {"alembic_version"}


def test_migration_matches_models(tmp_path):
    db_path = tmp_path / "migrated.db"
    command.upgrade(alembic_config(db_path), "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        columns = {c["name"] for c in inspect(engine).get_columns("gallery_items")}
        user_indexes = inspect(engine).get_indexes("users")
        with engine.connect() as conn:
            ddl = conn.execute(
                text("SELECT sql FROM sqlite_master WHERE name = 'gallery_items'")
            ).scalar_one()
    finally:
        engine.dispose()

    assert columns == {
        "id", "title", "category", "type", "image", "video_url", "description",
        "height", "featured", "tags", "created_at", "updated_at",
    }
    assert any(ix["unique"] and ix["column_names"] == ["username"] for ix in user_indexes)
    assert "AUTOINCREMENT" in ddl
