# ============================================================================
# ENUM PARSER
# ============================================================================
# STATUS: Core - Enum introspection
# PURPOSE: Turn an integer-backed enum into ordered lookup rows
# CREATED: 19 OCT 2026
# EXPORTS: EnumParser, MemberMetadata, lookup_enum, is_lookup_enum, RUNTIME_ONLY
# DEPENDENCIES: enum, re
# ============================================================================
"""
Enum Parser.

Derives (id, name) pairs from an enum definition.

Per-member metadata (display description, runtime-only flag) is declared in
a side table keyed by member name rather than attached to the members, so
parsing is a pure data transformation:

    @lookup_enum(
        storage=NumericStorage.BYTE,
        members={
            "Unknown": RUNTIME_ONLY,
            "BigAndFloppy": MemberMetadata(description="Big & floppy"),
        },
    )
    class Ears(IntEnum):
        Unknown = 0
        Pointy = 1
        BigAndFloppy = 2

    EnumParser().get_lookup_values(Ears)
    # [EnumValue(id=1, name="Pointy"), EnumValue(id=2, name="Big & floppy")]
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from core.contracts import EnumValue, NumericStorage
from core.exceptions import InvalidArgumentError
from core.logging import ComponentType, get_logger

logger = get_logger("schema.enum_parser", ComponentType.INTROSPECTION)

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1
BYTE_MAX = 255

_LOOKUP_STORAGE_ATTR = "__lookup_storage__"
_LOOKUP_MEMBERS_ATTR = "__lookup_members__"

# Space before an uppercase letter that directly follows a lowercase one
_WORD_BOUNDARY = re.compile(r"(?<=[a-z])([A-Z])")


@dataclass(frozen=True)
class MemberMetadata:
    """Lookup metadata for a single enum member."""
    description: Optional[str] = None
    runtime_only: bool = False


RUNTIME_ONLY = MemberMetadata(runtime_only=True)


def lookup_enum(
    storage: NumericStorage = NumericStorage.INT,
    members: Optional[Mapping[str, MemberMetadata]] = None,
) -> Callable[[Type[Enum]], Type[Enum]]:
    """
    Class decorator declaring lookup metadata for an enum.

    Args:
        storage: Underlying numeric type (BYTE for 0..255 enums)
        members: Metadata keyed by member name

    Returns:
        Decorator returning the enum class unchanged apart from the metadata
    """
    declared = dict(members or {})

    def decorator(enum_class: Type[Enum]) -> Type[Enum]:
        if not (isinstance(enum_class, type) and issubclass(enum_class, Enum)):
            raise InvalidArgumentError(
                f"lookup_enum can only decorate enums, got {enum_class!r}", enum_class
            )
        unknown = sorted(set(declared) - set(enum_class.__members__))
        if unknown:
            raise InvalidArgumentError(
                f"{enum_class.__name__} has no members named {unknown}", enum_class
            )
        setattr(enum_class, _LOOKUP_STORAGE_ATTR, NumericStorage(storage))
        setattr(enum_class, _LOOKUP_MEMBERS_ATTR, declared)
        return enum_class

    return decorator


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def declared_members(enum_type: Type[Enum]) -> List[Enum]:
    """
    Every declared member in declaration order, aliases excluded.

    Iterating a Flag skips the zero member and named combinations, so the
    members are read from __members__ instead.
    """
    return [member for name, member in enum_type.__members__.items() if member.name == name]


def is_lookup_enum(candidate: Any) -> bool:
    """True when candidate is an enum whose members are all integers."""
    if not (isinstance(candidate, type) and issubclass(candidate, Enum)):
        return False
    members = declared_members(candidate)
    return bool(members) and all(_is_integer(m.value) for m in members)


def split_camel_case(name: str) -> str:
    """Insert a space at each lowercase-to-uppercase boundary."""
    return _WORD_BOUNDARY.sub(r" \1", name)


class EnumParser:
    """
    Build lookup values from enum definitions.

    Settings:
        split_words: If True (default), "SomeValue" is stored as "Some Value".
                     Descriptions are always used verbatim.
        metadata: Optional side table {enum class: {member name: MemberMetadata}}.
                  Entries here win over metadata declared with @lookup_enum.
    """

    def __init__(
        self,
        split_words: bool = True,
        metadata: Optional[Mapping[Type[Enum], Mapping[str, MemberMetadata]]] = None,
    ):
        self.split_words = split_words
        self.metadata = dict(metadata or {})

    # =========================================================================
    # METADATA
    # =========================================================================

    def member_metadata(self, enum_type: Type[Enum]) -> Dict[str, MemberMetadata]:
        """Merged member metadata for an enum."""
        merged = dict(getattr(enum_type, _LOOKUP_MEMBERS_ATTR, None) or {})
        merged.update(self.metadata.get(enum_type, {}))
        return merged

    @staticmethod
    def numeric_storage(enum_type: Type[Enum]) -> NumericStorage:
        """Declared numeric storage of an enum (INT unless declared)."""
        return getattr(enum_type, _LOOKUP_STORAGE_ATTR, NumericStorage.INT)

    # =========================================================================
    # VALUES
    # =========================================================================

    def get_lookup_values(self, enum_type: Type[Enum]) -> List[EnumValue]:
        """
        Get the lookup rows for an enum, in declaration order.

        Args:
            enum_type: Integer-backed enum class

        Returns:
            One EnumValue per member that is not runtime-only

        Raises:
            InvalidArgumentError: Not an integer-backed enum, or a value does
                not fit the declared storage
        """
        if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
            raise InvalidArgumentError(f"Lookup type must be an enum, got {enum_type!r}", enum_type)
        if not is_lookup_enum(enum_type):
            raise InvalidArgumentError(
                f"Lookup enum {enum_type.__name__} must have integer values", enum_type
            )

        storage = self.numeric_storage(enum_type)
        metadata = self.member_metadata(enum_type)

        values = []
        for member in declared_members(enum_type):
            meta = metadata.get(member.name, MemberMetadata())
            if meta.runtime_only:
                logger.debug(f"{enum_type.__name__}.{member.name} is runtime-only, not stored")
                continue
            values.append(EnumValue(
                id=self._numeric_id(enum_type, member, storage),
                name=self._display_name(member, meta),
            ))
        return values

    @staticmethod
    def _numeric_id(enum_type: Type[Enum], member: Enum, storage: NumericStorage) -> int:
        # int() of IntEnum/IntFlag members gives the plain number
        numeric = int(member.value)
        if storage == NumericStorage.BYTE:
            low, high = 0, BYTE_MAX
        else:
            low, high = INT32_MIN, INT32_MAX
        if not low <= numeric <= high:
            raise InvalidArgumentError(
                f"{enum_type.__name__}.{member.name} = {numeric} does not fit "
                f"{storage.value} storage ({low}..{high})",
                enum_type,
            )
        return numeric

    def _display_name(self, member: Enum, meta: MemberMetadata) -> str:
        if meta.description is not None:
            return meta.description
        if self.split_words:
            return split_camel_case(member.name)
        return member.name


__all__ = [
    "EnumParser",
    "MemberMetadata",
    "RUNTIME_ONLY",
    "lookup_enum",
    "is_lookup_enum",
    "declared_members",
    "split_camel_case",
]
