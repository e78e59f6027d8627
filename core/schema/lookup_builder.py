# ============================================================================
# LOOKUP MODEL BUILDER
# ============================================================================
# STATUS: Core - Plan assembly
# PURPOSE: Combine discovered enums and references into a SynchronizationPlan
# CREATED: 19 OCT 2026
# EXPORTS: LookupModelBuilder
# DEPENDENCIES: none
# ============================================================================
"""
Lookup Model Builder.

Knows nothing about SQL. Output ordering is deterministic:
lookups by enum name, edges by (schema, table, field).
"""

from enum import Enum
from typing import Dict, Iterable, Optional, Type

from core.contracts import ForeignKeyEdge, LookupTable, SynchronizationPlan
from core.exceptions import PlanIntegrityError
from core.logging import ComponentType, get_logger, log_context
from core.schema.enum_parser import EnumParser

logger = get_logger("schema.lookup_builder", ComponentType.BUILDER)


class LookupModelBuilder:
    """Build a SynchronizationPlan from enum types and foreign key edges."""

    def __init__(self, parser: Optional[EnumParser] = None):
        self.parser = parser or EnumParser()

    def build(
        self,
        enum_types: Iterable[Type[Enum]],
        edges: Iterable[ForeignKeyEdge],
    ) -> SynchronizationPlan:
        """
        Assemble the plan.

        Args:
            enum_types: Distinct enum classes referenced by the model
            edges: Columns referencing those enums

        Returns:
            SynchronizationPlan with one LookupTable per enum type

        Raises:
            PlanIntegrityError: Two enums share a name, or an edge names an
                enum that is not in enum_types
            InvalidArgumentError: An enum cannot be parsed
        """
        by_name: Dict[str, Type[Enum]] = {}
        for enum_type in enum_types:
            name = enum_type.__name__
            existing = by_name.get(name)
            if existing is not None and existing is not enum_type:
                raise PlanIntegrityError(
                    f"Enums {existing.__module__}.{name} and {enum_type.__module__}.{name} "
                    f"would share lookup table for {name}",
                    enum_type_name=name,
                )
            by_name[name] = enum_type

        edge_list = sorted(
            set(edges),
            key=lambda e: (e.referencing_schema or "", e.referencing_table, e.referencing_field),
        )
        for edge in edge_list:
            if edge.enum_type_name not in by_name:
                raise PlanIntegrityError(
                    f"{edge.referencing_table}.{edge.referencing_field} references "
                    f"{edge.enum_type_name} which has no lookup table",
                    enum_type_name=edge.enum_type_name,
                )

        lookups = []
        for name in sorted(by_name):
            enum_type = by_name[name]
            with log_context(enum_type=name):
                values = self.parser.get_lookup_values(enum_type)
                lookups.append(LookupTable(
                    enum_type_name=name,
                    numeric_storage=self.parser.numeric_storage(enum_type),
                    values=tuple(values),
                ))
                logger.debug(f"Lookup {name}: {len(values)} values", extra={"values": len(values)})

        plan = SynchronizationPlan(lookups=tuple(lookups), edges=tuple(edge_list))
        logger.info(f"Built plan with {len(plan.lookups)} lookups and {len(plan.edges)} foreign keys")
        return plan


__all__ = ["LookupModelBuilder"]
