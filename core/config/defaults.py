# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for lookup table naming and synchronization
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for lookup table generation.
These can be overridden via environment variables or passed explicitly.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_TABLE_COMMENT = (
    "Automatically generated. Contents will be overwritten on app startup. "
    "Table & contents generated from application enums."
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class LookupDefaults:
    """
    Defaults for lookup table generation.

    Controls table naming, the Name column size and display name derivation.
    """
    # Table naming: <prefix><EnumName><suffix>
    table_name_prefix: str = "Enum_"
    table_name_suffix: str = ""

    # Size of the generated Name column
    name_field_length: int = 255

    # "SomeValue" is stored as "Some Value"
    split_words: bool = True

    # Schema holding the lookup tables (and referencing tables by default)
    schema_name: str = "public"

    # Session temp table used while merging rows
    staging_table_name: str = "enum_lookup_staging"

    table_comment: str = DEFAULT_TABLE_COMMENT

    def __post_init__(self):
        if self.name_field_length <= 0:
            raise ValueError(f"name_field_length must be positive, got {self.name_field_length}")
        # Names are rendered into DO $$ blocks and %-style parameterized batches
        for label, value in (
            ("table_name_prefix", self.table_name_prefix),
            ("table_name_suffix", self.table_name_suffix),
            ("schema_name", self.schema_name),
            ("staging_table_name", self.staging_table_name),
            ("table_comment", self.table_comment),
        ):
            if "%" in value or "$" in value:
                raise ValueError(f"{label} may not contain '%' or '$': {value!r}")
        if not self.schema_name or not self.staging_table_name:
            raise ValueError("schema_name and staging_table_name are required")

    def table_name(self, enum_type_name: str) -> str:
        """Lookup table name for an enum type."""
        return f"{self.table_name_prefix or ''}{enum_type_name}{self.table_name_suffix or ''}"

    @classmethod
    def from_env(cls) -> "LookupDefaults":
        """Create from environment variables."""
        return cls(
            table_name_prefix=os.getenv("ENUM_LOOKUP_TABLE_PREFIX", "Enum_"),
            table_name_suffix=os.getenv("ENUM_LOOKUP_TABLE_SUFFIX", ""),
            name_field_length=int(os.getenv("ENUM_LOOKUP_NAME_LENGTH", 255)),
            split_words=_env_bool("ENUM_LOOKUP_SPLIT_WORDS", True),
            schema_name=os.getenv("ENUM_LOOKUP_SCHEMA", "public"),
            staging_table_name=os.getenv("ENUM_LOOKUP_STAGING_TABLE", "enum_lookup_staging"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

_defaults: Optional[LookupDefaults] = None


def get_defaults() -> LookupDefaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = LookupDefaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_TABLE_COMMENT",
    "LookupDefaults",
    "get_defaults",
    "reset_defaults",
]
