# ============================================================================
# LOOKUP INITIALIZER TESTS
# ============================================================================
# STATUS: Tests - Synchronization runner
# PURPOSE: Verify step reporting with a mocked repository
# CREATED: 19 OCT 2026
# ============================================================================
"""
Lookup Initializer Tests

Covers:
1. Successful run: connection, sync, verification
2. Dry run returns the script and never touches the repository
3. Connection and sync failures stop the run
4. Verification mismatches are warnings, not failures

Run with:
    pytest tests/test_database_initializer.py -v
"""

import pytest
from unittest.mock import MagicMock

from core.config import LookupDefaults
from core.schema import PydanticModelReflector
from infrastructure.database_initializer import InitializationResult, LookupInitializer, StepResult

from sample_models import Carrot, Rabbit


EXPECTED_ROWS = {
    "Enum_Ears": [(1, "Pointy"), (2, "Big & floppy"), (3, "Lop")],
    "Enum_Legs": [(2, "Two"), (4, "Four")],
    "Enum_Pedigree": [(1, "Pure Bred"), (2, "Cross Bred"), (3, "Wild")],
    "Enum_Relation": [(1, "Parent"), (2, "Sibling"), (3, "Offspring")],
}


def rows_for(schema, table):
    return [{"id": i, "name": n} for i, n in EXPECTED_ROWS[table]]


EXPECTED_FOREIGN_KEYS = {
    ("public", "rabbit"): ["FK_rabbit_Lineage", "FK_rabbit_ears", "FK_rabbit_legs"],
    ("burrows", "kinship"): ["FK_kinship_relation"],
}


def foreign_keys_for(schema, table):
    return EXPECTED_FOREIGN_KEYS.get((schema, table), [])


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def repo():
    mock = MagicMock()
    mock.fetch_one.return_value = {"version": "PostgreSQL 16.2 on x86_64-pc-linux-gnu", "db": "warren"}
    mock.check_table_exists.return_value = True
    mock.get_lookup_rows.side_effect = rows_for
    mock.get_foreign_key_names.side_effect = foreign_keys_for
    return mock


@pytest.fixture
def reflector():
    return PydanticModelReflector([Rabbit])


@pytest.fixture
def initializer(repo):
    return LookupInitializer(repository=repo, settings=LookupDefaults())


# ============================================================================
# TESTS
# ============================================================================


class TestInitializeAll:
    def test_success(self, initializer, repo, reflector):
        result = initializer.initialize_all(reflector)

        assert result.success
        assert [s.name for s in result.steps] == ["test_connection", "sync_lookups", "verify_lookups"]
        assert all(s.status == "success" for s in result.steps)
        repo.run.assert_called_once()

    def test_batch_passed_to_repository(self, initializer, repo, reflector):
        initializer.initialize_all(reflector)

        sql_text, parameters = repo.run.call_args[0]
        assert 'CREATE TABLE "public"."Enum_Ears"' in sql_text
        assert ("id0", 1) in parameters

    def test_dry_run(self, initializer, repo, reflector):
        result = initializer.initialize_all(reflector, dry_run=True)

        assert result.success
        assert "CREATE TABLE" in result.script
        assert "script" not in result.steps[0].details
        repo.fetch_one.assert_not_called()
        repo.run.assert_not_called()

    def test_connection_failure(self, initializer, repo, reflector):
        repo.fetch_one.side_effect = Exception("connection refused")

        result = initializer.initialize_all(reflector)

        assert not result.success
        assert result.steps[0].status == "failed"
        assert "connection refused" in result.errors[0]
        repo.run.assert_not_called()

    def test_sync_failure(self, initializer, repo, reflector):
        repo.run.side_effect = RuntimeError("deadlock detected")

        result = initializer.initialize_all(reflector)

        assert not result.success
        assert result.steps[-1].name == "sync_lookups"
        assert result.steps[-1].status == "failed"
        assert "deadlock detected" in result.errors[0]

    def test_verification_mismatch_is_warning(self, initializer, repo, reflector):
        repo.get_lookup_rows.side_effect = lambda schema, table: []

        result = initializer.initialize_all(reflector)

        assert result.success
        assert result.steps[-1].status == "failed"
        assert len(result.steps[-1].details["mismatched"]) == 4
        assert result.warnings

    def test_missing_table_reported(self, initializer, repo, reflector):
        repo.check_table_exists.side_effect = lambda schema, table: table != "Enum_Legs"

        result = initializer.initialize_all(reflector)

        assert result.steps[-1].details["missing"] == ["Enum_Legs"]

    def test_missing_foreign_key_reported(self, initializer, repo, reflector):
        repo.get_foreign_key_names.side_effect = (
            lambda schema, table: ["FK_rabbit_ears"] if table == "rabbit" else foreign_keys_for(schema, table)
        )

        result = initializer.initialize_all(reflector)

        assert result.success
        verify = result.steps[-1]
        assert verify.status == "failed"
        assert verify.details["missing_foreign_keys"] == ["FK_rabbit_Lineage", "FK_rabbit_legs"]
        assert "FK_rabbit_legs" in result.warnings[0]

    def test_foreign_keys_read_once_per_table(self, initializer, repo, reflector):
        result = initializer.initialize_all(reflector)

        assert result.steps[-1].details["missing_foreign_keys"] == []
        assert sorted(c.args for c in repo.get_foreign_key_names.call_args_list) == [
            ("burrows", "kinship"),
            ("public", "rabbit"),
        ]

    def test_model_without_enums(self, initializer, repo):
        result = initializer.initialize_all(PydanticModelReflector([Carrot]))

        assert result.success
        assert result.steps[1].status == "skipped"
        repo.run.assert_not_called()


class TestInitializationResult:
    def test_to_dict_summary(self):
        result = InitializationResult(
            database_target="public",
            timestamp="2026-10-19T00:00:00+00:00",
            success=True,
            steps=[
                StepResult(name="a", status="success"),
                StepResult(name="b", status="skipped"),
                StepResult(name="c", status="failed", error="boom"),
            ],
        )

        summary = result.to_dict()["summary"]

        assert summary == {"total_steps": 3, "successful": 1, "failed": 1, "skipped": 1}
