# ============================================================================
# ENUM TO LOOKUP
# ============================================================================
# STATUS: Core - Synchronization entry point
# PURPOSE: Discover enum references, build the plan, apply or script it
# CREATED: 19 OCT 2026
# EXPORTS: EnumToLookup
# DEPENDENCIES: psycopg (via handlers)
# ============================================================================
"""
Enum To Lookup.

Wires the pieces together:
    ModelReflector -> ReferenceDiscoverer -> LookupModelBuilder
        -> LookupSqlHandler -> executor (or migration script)

Usage:
    from core.schema import EnumToLookup, PydanticModelReflector

    sync = EnumToLookup()
    reflector = PydanticModelReflector([Rabbit, Warren])

    # On startup
    sync.apply(reflector, repository)

    # For a reviewable migration
    print(sync.generate_migration_sql(reflector))
"""

import uuid
from typing import Optional

from core.config import LookupDefaults, get_defaults
from core.contracts import SynchronizationPlan
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.schema.dialects import get_handler
from core.schema.dialects.base import LookupSqlHandler, SqlBatch, SqlExecutor
from core.schema.discovery import ModelReflector, ReferenceDiscoverer
from core.schema.enum_parser import EnumParser
from core.schema.lookup_builder import LookupModelBuilder

logger = get_logger("schema.enum_to_lookup", ComponentType.ORCHESTRATOR)


class EnumToLookup:
    """
    Keep enum lookup tables and their foreign keys in sync with code.

    Args:
        settings: Naming and parsing settings (default: from environment)
        handler: SQL handler (default: PostgreSQL with the same settings)
        parser: Enum parser (default: built from settings.split_words)
    """

    def __init__(
        self,
        settings: Optional[LookupDefaults] = None,
        handler: Optional[LookupSqlHandler] = None,
        parser: Optional[EnumParser] = None,
    ):
        self.settings = settings or get_defaults()
        self.parser = parser or EnumParser(split_words=self.settings.split_words)
        self.handler = handler or get_handler("postgresql", self.settings)
        self.builder = LookupModelBuilder(self.parser)

    def build_plan(self, reflector: ModelReflector) -> SynchronizationPlan:
        """Discover enum references and build the synchronization plan."""
        with log_context(operation="build_plan"):
            result = ReferenceDiscoverer(reflector).discover()
            if result.skipped:
                logger.warning(f"Skipped {len(result.skipped)} unclassifiable fields or types")

            plan = self.builder.build(result.enum_types, result.edges)
            log_checkpoint("plan_built", {
                "lookups": [lookup.enum_type_name for lookup in plan.lookups],
                "edges": len(plan.edges),
            })
            return plan

    def apply(self, reflector: ModelReflector, executor: SqlExecutor) -> SqlBatch:
        """
        Create, fill and reference lookup tables in the database.

        Errors raised by the executor propagate unchanged.
        """
        with log_context(correlation_id=uuid.uuid4().hex[:12], operation="apply"):
            plan = self.build_plan(reflector)
            batch = self.handler.apply(plan, executor)
            log_checkpoint("lookups_applied", {"statements": batch.statement_count})
            return batch

    def generate_migration_sql(self, reflector: ModelReflector) -> str:
        """Return the synchronization SQL with values inlined, without running it."""
        with log_context(operation="script"):
            plan = self.build_plan(reflector)
            script = self.handler.generate_migration_sql(plan)
            logger.info(f"Generated migration script ({len(script)} characters)")
            return script


__all__ = ["EnumToLookup"]
