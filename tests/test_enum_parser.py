# ============================================================================
# ENUM PARSER TESTS
# ============================================================================
# STATUS: Tests - Enum introspection
# PURPOSE: Verify lookup values, member metadata, and word splitting
# CREATED: 19 OCT 2026
# ============================================================================
"""
Enum Parser Tests

Covers:
1. Declaration order and one value per member
2. Runtime-only members are excluded
3. Descriptions are used verbatim
4. Word splitting at lowercase -> uppercase boundaries only
5. Byte storage range (255 is valid, 256 is not)
6. Non-enum and non-integer enums are rejected

Run with:
    pytest tests/test_enum_parser.py -v
"""

import pytest
from enum import Enum, IntEnum, IntFlag

from core.contracts import EnumValue, NumericStorage
from core.exceptions import InvalidArgumentError
from core.schema import EnumParser, MemberMetadata, RUNTIME_ONLY, is_lookup_enum, lookup_enum
from core.schema.enum_parser import split_camel_case

from sample_models import Colour, Ears, Legs


# ============================================================================
# VALUES
# ============================================================================


class TestGetLookupValues:
    def test_one_value_per_member_in_declaration_order(self):
        class Priority(IntEnum):
            High = 3
            Low = 1
            Medium = 2

        values = EnumParser().get_lookup_values(Priority)

        assert values == [
            EnumValue(id=3, name="High"),
            EnumValue(id=1, name="Low"),
            EnumValue(id=2, name="Medium"),
        ]

    def test_plain_enum_with_int_values(self):
        class Size(Enum):
            Small = 1
            Large = 2

        values = EnumParser().get_lookup_values(Size)
        assert [v.id for v in values] == [1, 2]

    def test_runtime_only_member_excluded(self):
        values = EnumParser().get_lookup_values(Ears)

        assert 0 not in [v.id for v in values]
        assert [v.id for v in values] == [1, 2, 3]

    def test_description_used_verbatim(self):
        values = EnumParser().get_lookup_values(Ears)
        assert EnumValue(id=2, name="Big & floppy") in values

    def test_description_ignores_split_words_setting(self):
        values = EnumParser(split_words=False).get_lookup_values(Ears)
        assert EnumValue(id=2, name="Big & floppy") in values

    def test_split_words_enabled(self):
        class Status(IntEnum):
            SomeValue = 1
            ABCValue = 2
            ParsedABCValue = 3

        names = [v.name for v in EnumParser().get_lookup_values(Status)]
        assert names == ["Some Value", "ABCValue", "Parsed ABCValue"]

    def test_split_words_disabled(self):
        class Status(IntEnum):
            SomeValue = 1

        values = EnumParser(split_words=False).get_lookup_values(Status)
        assert values == [EnumValue(id=1, name="SomeValue")]

    def test_side_table_overrides_decorator(self):
        parser = EnumParser(metadata={
            Ears: {
                "Unknown": MemberMetadata(description="Not recorded"),
                "Lop": RUNTIME_ONLY,
            },
        })

        values = parser.get_lookup_values(Ears)

        assert values[0] == EnumValue(id=0, name="Not recorded")
        assert 3 not in [v.id for v in values]
        # Decorator metadata for other members still applies
        assert EnumValue(id=2, name="Big & floppy") in values

    def test_int_flag_values(self):
        class Permission(IntFlag):
            Read = 1
            Write = 2
            Execute = 4

        assert [v.id for v in EnumParser().get_lookup_values(Permission)] == [1, 2, 4]

    def test_int_flag_keeps_zero_and_named_combinations(self):
        class Access(IntFlag):
            Nothing = 0
            Read = 1
            Write = 2
            ReadWrite = 3

        values = EnumParser().get_lookup_values(Access)

        assert values == [
            EnumValue(id=0, name="Nothing"),
            EnumValue(id=1, name="Read"),
            EnumValue(id=2, name="Write"),
            EnumValue(id=3, name="Read Write"),
        ]
        assert is_lookup_enum(Access)

    def test_aliases_are_not_separate_rows(self):
        class Gait(IntEnum):
            Hop = 1
            Bound = 2
            Leap = 2

        assert EnumParser().get_lookup_values(Gait) == [
            EnumValue(id=1, name="Hop"),
            EnumValue(id=2, name="Bound"),
        ]


# ============================================================================
# NUMERIC STORAGE
# ============================================================================


class TestNumericStorage:
    def test_default_storage_is_int(self):
        assert EnumParser.numeric_storage(Legs) == NumericStorage.INT

    def test_declared_byte_storage(self):
        assert EnumParser.numeric_storage(Ears) == NumericStorage.BYTE

    def test_byte_255_is_valid(self):
        @lookup_enum(storage=NumericStorage.BYTE)
        class Level(IntEnum):
            Zero = 0
            Max = 255

        values = EnumParser().get_lookup_values(Level)
        assert values[-1].id == 255

    def test_byte_out_of_range(self):
        @lookup_enum(storage=NumericStorage.BYTE)
        class Level(IntEnum):
            TooBig = 256

        with pytest.raises(InvalidArgumentError):
            EnumParser().get_lookup_values(Level)

    def test_int32_out_of_range(self):
        class Huge(IntEnum):
            Big = 2**31

        with pytest.raises(InvalidArgumentError):
            EnumParser().get_lookup_values(Huge)

    def test_negative_values_allowed_for_int(self):
        class Offset(IntEnum):
            Minus = -1
            Plus = 1

        assert [v.id for v in EnumParser().get_lookup_values(Offset)] == [-1, 1]


# ============================================================================
# INVALID INPUT
# ============================================================================


class TestInvalidInput:
    def test_non_enum_type(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            EnumParser().get_lookup_values(int)
        assert exc_info.value.argument is int

    def test_non_type(self):
        with pytest.raises(InvalidArgumentError):
            EnumParser().get_lookup_values("Ears")

    def test_string_enum_rejected(self):
        with pytest.raises(InvalidArgumentError):
            EnumParser().get_lookup_values(Colour)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            EnumParser().get_lookup_values(Colour)

    def test_decorator_rejects_unknown_member(self):
        with pytest.raises(InvalidArgumentError):
            @lookup_enum(members={"Missing": RUNTIME_ONLY})
            class Small(IntEnum):
                One = 1

    def test_decorator_rejects_non_enum(self):
        with pytest.raises(InvalidArgumentError):
            @lookup_enum()
            class NotAnEnum:
                pass


# ============================================================================
# HELPERS
# ============================================================================


class TestHelpers:
    def test_is_lookup_enum(self):
        assert is_lookup_enum(Ears)
        assert is_lookup_enum(Legs)
        assert not is_lookup_enum(Colour)
        assert not is_lookup_enum(int)
        assert not is_lookup_enum(None)

    def test_bool_valued_enum_is_not_lookup_enum(self):
        class Toggle(Enum):
            Off = False
            On = True

        assert not is_lookup_enum(Toggle)

    def test_split_camel_case(self):
        assert split_camel_case("SomeValue") == "Some Value"
        assert split_camel_case("ABCValue") == "ABCValue"
        assert split_camel_case("already spaced") == "already spaced"
        assert split_camel_case("oneTwoThree") == "one Two Three"
