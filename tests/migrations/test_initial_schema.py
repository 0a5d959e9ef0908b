# tests/migrations/test_initial_schema.py
"""Tests for the initial alembic revision."""

from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from types import ModuleType

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import JSON, create_engine, inspect

from app.configs.settings import MAX_TAG_LENGTH

REVISION_PATH = (
    Path(__file__).parents[2] / "alembic" / "versions" / "20261019_0001_initial_schema.py"
)


@pytest.fixture
def revision() -> ModuleType:
    spec = spec_from_file_location("initial_schema", REVISION_PATH)
    assert spec is not None
    assert spec.loader is not None
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_upgrade_and_downgrade_on_sqlite(revision: ModuleType) -> None:
    engine = create_engine("sqlite://")

    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.upgrade()

        inspector = inspect(conn)
        assert {"posts", "post_tags", "featured_posts"} <= set(inspector.get_table_names())
        columns = {c["name"]: c["type"] for c in inspector.get_columns("posts")}
        assert isinstance(columns["tags"], JSON)
        tag_column = next(c for c in inspector.get_columns("post_tags") if c["name"] == "tag")
        assert tag_column["type"].length == MAX_TAG_LENGTH

        with Operations.context(MigrationContext.configure(conn)):
            revision.downgrade()

        assert not {"posts", "post_tags", "featured_posts"} & set(inspect(conn).get_table_names())

    engine.dispose()
