# ============================================================================
# LOOKUP MODEL BUILDER TESTS
# ============================================================================
# STATUS: Tests - Plan assembly and contracts
# PURPOSE: Verify plan contents, ordering, and integrity checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Lookup Model Builder Tests

Covers:
1. One LookupTable per enum, with parsed values and storage
2. Deterministic ordering regardless of input order
3. Edges never reference enums without a lookup table
4. SynchronizationPlan validation

Run with:
    pytest tests/test_lookup_builder.py -v
"""

import pytest
from enum import IntEnum

from pydantic import ValidationError

from core.contracts import (
    EnumValue,
    ForeignKeyEdge,
    LookupTable,
    NumericStorage,
    SynchronizationPlan,
)
from core.exceptions import PlanIntegrityError
from core.schema import EnumParser, LookupModelBuilder, PydanticModelReflector, ReferenceDiscoverer

from sample_models import Ears, Legs, Pedigree, Rabbit


def edge(table, field, enum_name, schema=None):
    return ForeignKeyEdge(
        referencing_table=table,
        referencing_field=field,
        enum_type_name=enum_name,
        referencing_schema=schema,
    )


# ============================================================================
# BUILDER
# ============================================================================


class TestLookupModelBuilder:
    def test_lookup_per_enum(self):
        plan = LookupModelBuilder().build([Ears, Legs], [edge("rabbit", "ears", "Ears")])

        assert [lookup.enum_type_name for lookup in plan.lookups] == ["Ears", "Legs"]
        ears = plan.get_lookup("Ears")
        assert ears.numeric_storage == NumericStorage.BYTE
        assert ears.values == (
            EnumValue(id=1, name="Pointy"),
            EnumValue(id=2, name="Big & floppy"),
            EnumValue(id=3, name="Lop"),
        )
        assert plan.get_lookup("Legs").numeric_storage == NumericStorage.INT

    def test_uses_given_parser(self):
        plan = LookupModelBuilder(EnumParser(split_words=False)).build([Pedigree], [])
        assert plan.get_lookup("Pedigree").values[0].name == "PureBred"

    def test_deterministic_order(self):
        edges = [
            edge("rabbit", "legs", "Legs"),
            edge("rabbit", "ears", "Ears"),
            edge("kinship", "relation", "Legs", schema="burrows"),
        ]
        first = LookupModelBuilder().build([Legs, Ears], edges)
        second = LookupModelBuilder().build([Ears, Legs], list(reversed(edges)))

        assert first == second
        assert [(e.referencing_table, e.referencing_field) for e in first.edges] == [
            ("rabbit", "ears"),
            ("rabbit", "legs"),
            ("kinship", "relation"),
        ]

    def test_duplicate_edges_collapsed(self):
        plan = LookupModelBuilder().build(
            [Ears], [edge("rabbit", "ears", "Ears"), edge("rabbit", "ears", "Ears")]
        )
        assert len(plan.edges) == 1

    def test_same_enum_listed_twice(self):
        plan = LookupModelBuilder().build([Ears, Ears], [])
        assert len(plan.lookups) == 1

    def test_edge_without_enum_rejected(self):
        with pytest.raises(PlanIntegrityError) as exc_info:
            LookupModelBuilder().build([Ears], [edge("rabbit", "legs", "Legs")])
        assert exc_info.value.enum_type_name == "Legs"

    def test_enum_name_collision_rejected(self):
        class Ears(IntEnum):
            Round = 1

        from sample_models import Ears as SampleEars

        with pytest.raises(PlanIntegrityError):
            LookupModelBuilder().build([SampleEars, Ears], [])

    def test_empty_input(self):
        plan = LookupModelBuilder().build([], [])
        assert plan.is_empty

    def test_discovered_model_is_consistent(self):
        result = ReferenceDiscoverer(PydanticModelReflector([Rabbit])).discover()
        plan = LookupModelBuilder().build(result.enum_types, result.edges)

        lookup_names = {lookup.enum_type_name for lookup in plan.lookups}
        assert {e.enum_type_name for e in plan.edges} <= lookup_names
        assert lookup_names == {"Ears", "Legs", "Pedigree", "Relation"}


# ============================================================================
# CONTRACTS
# ============================================================================


class TestSynchronizationPlan:
    def test_edge_without_lookup_invalid(self):
        with pytest.raises(ValidationError):
            SynchronizationPlan(lookups=(), edges=(edge("rabbit", "ears", "Ears"),))

    def test_duplicate_lookup_invalid(self):
        lookup = LookupTable(enum_type_name="Ears")
        with pytest.raises(ValidationError):
            SynchronizationPlan(lookups=(lookup, lookup))

    def test_frozen(self):
        plan = SynchronizationPlan()
        with pytest.raises(ValidationError):
            plan.lookups = ()

    def test_get_lookup_missing(self):
        assert SynchronizationPlan().get_lookup("Ears") is None

    def test_enum_value_range(self):
        with pytest.raises(ValidationError):
            EnumValue(id=2**31, name="Overflow")

    def test_edges_hashable(self):
        assert len({edge("a", "b", "C"), edge("a", "b", "C")}) == 1
