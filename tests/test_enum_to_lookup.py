# ============================================================================
# ENUM TO LOOKUP TESTS
# ============================================================================
# STATUS: Tests - End-to-end synchronization without a database
# PURPOSE: Verify the model -> plan -> executor pipeline
# CREATED: 19 OCT 2026
# ============================================================================
"""
Enum To Lookup Tests

Covers:
1. apply() hands one parameterized batch to the executor
2. Executor errors propagate unchanged
3. Models without enum references never reach the executor
4. Migration scripts match the applied batch

Run with:
    pytest tests/test_enum_to_lookup.py -v
"""

import pytest
from typing import Any, List, Sequence, Tuple

from core.config import LookupDefaults
from core.schema import EnumToLookup, PydanticModelReflector, SqlExecutor

from sample_models import Carrot, Rabbit


class RecordingExecutor:
    """Executor that remembers every batch."""

    def __init__(self):
        self.calls: List[Tuple[str, List[Tuple[str, Any]]]] = []

    def run(self, sql_text: str, parameters: Sequence[Tuple[str, Any]]) -> None:
        self.calls.append((sql_text, list(parameters)))


class FailingExecutor:
    def run(self, sql_text, parameters):
        raise RuntimeError("connection reset")


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def sync():
    return EnumToLookup(settings=LookupDefaults())


@pytest.fixture
def executor():
    return RecordingExecutor()


# ============================================================================
# TESTS
# ============================================================================


class TestApply:
    def test_recording_executor_is_sql_executor(self, executor):
        assert isinstance(executor, SqlExecutor)

    def test_single_batch(self, sync, executor):
        batch = sync.apply(PydanticModelReflector([Rabbit]), executor)

        assert len(executor.calls) == 1
        sql_text, parameters = executor.calls[0]
        assert sql_text == batch.sql_text
        assert parameters == batch.parameters

    def test_parameters_in_lookup_order(self, sync, executor):
        sync.apply(PydanticModelReflector([Rabbit]), executor)
        _, parameters = executor.calls[0]

        # Ears first (sorted), runtime-only Unknown excluded
        assert parameters[:4] == [
            ("id0", 1), ("name1", "Pointy"),
            ("id2", 2), ("name3", "Big & floppy"),
        ]
        assert ("name13", "Cross Bred") in parameters

    def test_all_tables_and_keys(self, sync, executor):
        sync.apply(PydanticModelReflector([Rabbit]), executor)
        sql_text, _ = executor.calls[0]

        for table in ("Enum_Ears", "Enum_Legs", "Enum_Pedigree", "Enum_Relation"):
            assert f'CREATE TABLE "public"."{table}"' in sql_text
        assert '"FK_rabbit_Lineage"' in sql_text
        assert 'ALTER TABLE "burrows"."kinship"' in sql_text

    def test_executor_error_propagates(self, sync):
        with pytest.raises(RuntimeError, match="connection reset"):
            sync.apply(PydanticModelReflector([Rabbit]), FailingExecutor())

    def test_no_enum_references(self, sync, executor):
        batch = sync.apply(PydanticModelReflector([Carrot]), executor)

        assert executor.calls == []
        assert batch.statement_count == 0

    def test_repeated_apply_sends_identical_batch(self, sync, executor):
        reflector = PydanticModelReflector([Rabbit])
        sync.apply(reflector, executor)
        sync.apply(reflector, executor)
        assert executor.calls[0] == executor.calls[1]


class TestMigrationScript:
    def test_script_without_executor(self, sync):
        script = sync.generate_migration_sql(PydanticModelReflector([Rabbit]))

        assert "'Big & floppy'" in script
        assert "%(" not in script

    def test_script_empty_for_model_without_enums(self, sync):
        assert sync.generate_migration_sql(PydanticModelReflector([Carrot])) == ""

    def test_build_plan(self, sync):
        plan = sync.build_plan(PydanticModelReflector([Rabbit]))
        assert [lookup.enum_type_name for lookup in plan.lookups] == [
            "Ears", "Legs", "Pedigree", "Relation",
        ]
        assert len(plan.edges) == 4

    def test_split_words_setting(self):
        sync = EnumToLookup(settings=LookupDefaults(split_words=False))
        plan = sync.build_plan(PydanticModelReflector([Rabbit]))
        assert plan.get_lookup("Pedigree").values[0].name == "PureBred"
