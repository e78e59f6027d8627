# ============================================================================
# LOOKUP INITIALIZER
# ============================================================================
# STATUS: Infrastructure - Lookup synchronization runner
# PURPOSE: Run enum lookup synchronization against PostgreSQL with step reporting
# CREATED: 19 OCT 2026
# ============================================================================
"""
LookupInitializer - enum lookup tables as code.

Workflow, safe to run on every startup:
1. test_connection   SELECT version()
2. sync_lookups      one atomic batch: tables, contents, foreign keys
3. verify_lookups    every lookup table exists and holds exactly the enum's rows
                     and every enum column has its foreign key

Steps 1 and 2 are critical: a failure ends the run with success=False.
A verification failure is recorded as a warning.

Usage:
    from infrastructure import LookupInitializer
    from core.schema import PydanticModelReflector

    result = LookupInitializer().initialize_all(PydanticModelReflector([Rabbit]))

    # Dry run (no connection, script only)
    result = LookupInitializer().initialize_all(reflector, dry_run=True)
    print(result.script)
"""

import logging
import traceback
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from core.config import LookupDefaults, get_defaults
from core.contracts import SynchronizationPlan
from core.schema import EnumToLookup, ModelReflector
from core.schema.ddl_utils import ConstraintBuilder

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class StepResult:
    """Outcome of one step: 'success', 'failed', or 'skipped'."""
    name: str
    status: str = "pending"
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status == "failed"


@dataclass
class InitializationResult:
    """Outcome of a synchronization run."""
    database_target: str
    timestamp: str
    success: bool = False
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    script: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form with a per-status step summary."""
        counts = Counter(step.status for step in self.steps)
        data = asdict(self)
        data["summary"] = {
            "total_steps": len(self.steps),
            "successful": counts["success"],
            "failed": counts["failed"],
            "skipped": counts["skipped"],
        }
        return data


# ============================================================================
# LOOKUP INITIALIZER
# ============================================================================

class LookupInitializer:
    """
    Lookup synchronization runner.

    Args:
        repository: Object providing fetch_one, run, check_table_exists,
            get_lookup_rows and get_foreign_key_names (default:
            PostgreSQLRepository, created lazily)
        settings: Lookup settings (default: from environment)
        sync: EnumToLookup instance (default: built from settings)
        connection_string: Passed to the default repository
    """

    def __init__(
        self,
        repository=None,
        settings: Optional[LookupDefaults] = None,
        sync: Optional[EnumToLookup] = None,
        connection_string: Optional[str] = None,
    ):
        self.settings = settings or get_defaults()
        self.sync = sync or EnumToLookup(settings=self.settings)
        self._repo = repository
        self._connection_string = connection_string

    @property
    def repo(self):
        if self._repo is None:
            from infrastructure.postgresql import PostgreSQLRepository
            self._repo = PostgreSQLRepository(
                connection_string=self._connection_string,
                schema_name=self.settings.schema_name,
            )
        return self._repo

    # ========================================================================
    # WORKFLOW
    # ========================================================================

    def initialize_all(self, reflector: ModelReflector, dry_run: bool = False) -> InitializationResult:
        """
        Synchronize lookup tables for a model.

        Args:
            reflector: Describes the application's entities
            dry_run: Generate the migration script without connecting

        Returns:
            InitializationResult; plan-building errors are reported in errors,
            not raised
        """
        result = InitializationResult(
            database_target=self.settings.schema_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        logger.info("=" * 70)
        logger.info(f"ENUM LOOKUP SYNCHRONIZATION ({'DRY RUN' if dry_run else 'EXECUTE'})")
        logger.info(f"   Schema: {self.settings.schema_name}")
        logger.info("=" * 70)

        try:
            plan = self.sync.build_plan(reflector)
        except Exception as e:
            logger.error(f"Could not build synchronization plan: {e}")
            result.errors.append(f"Plan failed: {e}")
            return result

        if dry_run:
            step = self._run_step("generate_script", self._generate_script, plan)
            result.steps.append(step)
            result.script = step.details.pop("script", None)
            result.success = not step.failed
            return result

        for name, action, critical in (
            ("test_connection", self._test_connection, True),
            ("sync_lookups", self._sync_lookups, True),
            ("verify_lookups", self._verify_lookups, False),
        ):
            step = self._run_step(name, action, plan)
            result.steps.append(step)
            if step.failed and critical:
                result.errors.append(f"{name} failed: {step.error}")
                break
            if step.failed:
                result.warnings.append(f"{name}: {step.error}")
        else:
            result.success = True

        summary = result.to_dict()["summary"]
        logger.info(
            f"SYNCHRONIZATION {'COMPLETE' if result.success else 'FAILED'}: "
            f"{summary['successful']} succeeded, {summary['failed']} failed, "
            f"{summary['skipped']} skipped"
        )
        return result

    def _run_step(
        self,
        name: str,
        action: Callable[[SynchronizationPlan, StepResult], None],
        plan: SynchronizationPlan,
    ) -> StepResult:
        """Run one step; any exception marks it failed instead of propagating."""
        step = StepResult(name=name)
        logger.info(f"Step: {name}...")
        try:
            action(plan, step)
            if step.status == "pending":
                step.status = "success"
        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = step.message or f"{name} failed: {e}"
            logger.error(f"{name} failed: {e}")
            logger.debug(traceback.format_exc())
        logger.info(f"   Result: {step.status} - {step.message}")
        return step

    # ========================================================================
    # STEPS
    # ========================================================================

    def _generate_script(self, plan: SynchronizationPlan, step: StepResult) -> None:
        script = self.sync.handler.generate_migration_sql(plan)
        step.message = f"[DRY RUN] Script for {len(plan.lookups)} lookups, {len(plan.edges)} foreign keys"
        step.details = {"lookups": len(plan.lookups), "foreign_keys": len(plan.edges), "script": script}

    def _test_connection(self, plan: SynchronizationPlan, step: StepResult) -> None:
        row = self.repo.fetch_one("SELECT version() AS version, current_database() AS db")
        step.message = f"Connected to {row['db']}"
        step.details = {"database": row["db"], "version": row["version"].split(" on ")[0]}

    def _sync_lookups(self, plan: SynchronizationPlan, step: StepResult) -> None:
        if plan.is_empty:
            step.status = "skipped"
            step.message = "No enum references in model"
            return

        batch = self.sync.handler.apply(plan, self.repo)
        step.message = (
            f"Synchronized {len(plan.lookups)} lookups and {len(plan.edges)} foreign keys "
            f"({batch.statement_count} statements)"
        )
        step.details = {
            "statements": batch.statement_count,
            "parameters": len(batch.parameters),
            "lookups": [lookup.enum_type_name for lookup in plan.lookups],
        }

    def _verify_lookups(self, plan: SynchronizationPlan, step: StepResult) -> None:
        schema = self.settings.schema_name
        missing: List[str] = []
        mismatched: List[str] = []

        for lookup in plan.lookups:
            table = self.settings.table_name(lookup.enum_type_name)
            if not self.repo.check_table_exists(schema, table):
                missing.append(table)
                continue
            stored = {(row["id"], row["name"]) for row in self.repo.get_lookup_rows(schema, table)}
            if stored != {(value.id, value.name) for value in lookup.values}:
                mismatched.append(table)

        missing_keys: List[str] = []
        existing_keys: Dict[Tuple[str, str], Set[str]] = {}
        for edge in plan.edges:
            target = (edge.referencing_schema or schema, edge.referencing_table)
            if target not in existing_keys:
                existing_keys[target] = set(self.repo.get_foreign_key_names(*target))
            name = ConstraintBuilder.foreign_key_name(edge.referencing_table, edge.referencing_field)
            if name not in existing_keys[target]:
                missing_keys.append(name)

        step.details = {"missing": missing, "mismatched": mismatched, "missing_foreign_keys": missing_keys}
        if missing or mismatched or missing_keys:
            step.status = "failed"
            step.error = (
                f"missing tables {missing}, contents differ in {mismatched}, "
                f"missing foreign keys {missing_keys}"
            )
            step.message = "Lookup tables do not match enums"
        else:
            step.message = (
                f"All {len(plan.lookups)} lookup tables match their enums, "
                f"{len(plan.edges)} foreign keys present"
            )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def initialize_lookups(reflector: ModelReflector, dry_run: bool = False) -> InitializationResult:
    """Synchronize enum lookup tables with default settings (startup hooks, scripts)."""
    return LookupInitializer().initialize_all(reflector, dry_run=dry_run)


__all__ = [
    "LookupInitializer",
    "InitializationResult",
    "StepResult",
    "initialize_lookups",
]
