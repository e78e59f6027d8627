# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Enum lookup table synchronization
# PURPOSE: Derive lookup tables from enums and generate idempotent SQL
# CREATED: 19 OCT 2026
# ============================================================================

from core.schema.ddl_utils import (
    CommentBuilder,
    ConstraintBuilder,
    NUMERIC_TYPE_MAP,
    get_numeric_sql_type,
    quote_literal,
)
from core.schema.enum_parser import (
    EnumParser,
    MemberMetadata,
    RUNTIME_ONLY,
    is_lookup_enum,
    lookup_enum,
)
from core.schema.discovery import (
    DiscoveryResult,
    EntityDescriptor,
    FieldDescriptor,
    ModelReflector,
    PydanticModelReflector,
    ReferenceDiscoverer,
)
from core.schema.lookup_builder import LookupModelBuilder
from core.schema.dialects import (
    LookupSqlHandler,
    PostgreSQLLookupHandler,
    SqlBatch,
    SqlExecutor,
    get_handler,
)
from core.schema.enum_to_lookup import EnumToLookup

__all__ = [
    # Entry point
    "EnumToLookup",
    # Introspection
    "EnumParser",
    "MemberMetadata",
    "RUNTIME_ONLY",
    "is_lookup_enum",
    "lookup_enum",
    # Discovery
    "DiscoveryResult",
    "EntityDescriptor",
    "FieldDescriptor",
    "ModelReflector",
    "PydanticModelReflector",
    "ReferenceDiscoverer",
    # Plan
    "LookupModelBuilder",
    # SQL
    "LookupSqlHandler",
    "PostgreSQLLookupHandler",
    "SqlBatch",
    "SqlExecutor",
    "get_handler",
    # Utilities
    "CommentBuilder",
    "ConstraintBuilder",
    "NUMERIC_TYPE_MAP",
    "get_numeric_sql_type",
    "quote_literal",
]
