# ============================================================================
# REFERENCE DISCOVERY
# ============================================================================
# STATUS: Core - Model graph traversal
# PURPOSE: Find every storage column whose type is an integer-backed enum
# CREATED: 19 OCT 2026
# EXPORTS: ModelReflector, PydanticModelReflector, ReferenceDiscoverer,
#          EntityDescriptor, FieldDescriptor, DiscoveryResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Reference Discovery.

The discoverer never reflects over arbitrary objects itself. It asks a
ModelReflector to describe entity types and only classifies the field
annotations it is handed.

Pydantic models follow the same metadata convention as the DDL generator:
    - __sql_table__: Table name (models without it are value objects,
      stored as JSONB inside their owner)
    - __sql_schema__: Schema name
    - __sql_column_names__: Optional {field: column} overrides

Usage:
    reflector = PydanticModelReflector([Rabbit, Warren])
    result = ReferenceDiscoverer(reflector).discover()
    result.enum_types   # (Ears, Legs, ...)
    result.edges        # (ForeignKeyEdge(...), ...)
"""

import collections.abc
import typing
from abc import ABC, abstractmethod
from collections import deque
from types import UnionType
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Annotated, Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union,
    get_args, get_origin,
)

from pydantic import BaseModel

from core.contracts import ForeignKeyEdge
from core.exceptions import DiscoveryIncompleteError
from core.logging import ComponentType, get_logger, log_context
from core.schema.enum_parser import is_lookup_enum

logger = get_logger("schema.discovery", ComponentType.DISCOVERY)

_COLLECTION_ORIGINS = (
    list, set, frozenset, tuple,
    collections.abc.Sequence, collections.abc.Set, collections.abc.Iterable,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping)


# ============================================================================
# DESCRIPTORS
# ============================================================================

@dataclass(frozen=True)
class FieldDescriptor:
    """A declared field of an entity."""
    name: str
    column_name: str
    annotation: Any


@dataclass(frozen=True)
class EntityDescriptor:
    """
    A model type as seen by the discoverer.

    table_name is None for value objects: they own no columns but their
    fields may lead to further entities.
    """
    type_name: str
    table_name: Optional[str]
    schema_name: Optional[str] = None
    fields: Tuple[FieldDescriptor, ...] = ()

    @property
    def is_storage_entity(self) -> bool:
        return self.table_name is not None


@dataclass(frozen=True)
class DiscoveryResult:
    """Distinct enum types (in discovery order) and the columns using them."""
    enum_types: Tuple[Type[Enum], ...] = ()
    edges: Tuple[ForeignKeyEdge, ...] = ()
    skipped: Tuple[str, ...] = field(default=(), compare=False)


# ============================================================================
# REFLECTOR CAPABILITY
# ============================================================================

class ModelReflector(ABC):
    """Describes the host data model to the discoverer."""

    @abstractmethod
    def root_types(self) -> Iterable[Any]:
        """Entry points of the model graph."""

    @abstractmethod
    def describe(self, entity_type: Any) -> Optional[EntityDescriptor]:
        """
        Describe a model type.

        Returns:
            EntityDescriptor, or None when entity_type is not a model type

        Raises:
            DiscoveryIncompleteError: The type is a model but cannot be introspected
        """


class PydanticModelReflector(ModelReflector):
    """
    Reflect Pydantic models carrying __sql_* metadata.

    Args:
        models: Root model classes (e.g. every model that maps to a table)
    """

    def __init__(self, models: Sequence[Type[BaseModel]]):
        self.models = list(models)

    def root_types(self) -> Iterable[Any]:
        return list(self.models)

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract SQL metadata from a Pydantic model.

        Looks for __sql_* attributes (which Python mangles to _ClassName__sql_*).
        """
        def get_attr(name: str, default=None):
            mangled = f"_{model.__name__}__{name}"
            return getattr(model, mangled, getattr(model, f"__{name}", default))

        return {
            "table": get_attr("sql_table__"),
            "schema": get_attr("sql_schema__"),
            "column_names": get_attr("sql_column_names__", {}) or {},
        }

    def describe(self, entity_type: Any) -> Optional[EntityDescriptor]:
        if not (isinstance(entity_type, type) and issubclass(entity_type, BaseModel)):
            return None

        try:
            model_fields = entity_type.model_fields
        except Exception as e:
            raise DiscoveryIncompleteError(
                f"Cannot read fields of {entity_type.__name__}: {e}",
                entity=entity_type.__name__,
            ) from e

        meta = self.get_model_metadata(entity_type)
        column_names = meta["column_names"]

        fields = tuple(
            FieldDescriptor(
                name=name,
                column_name=column_names.get(name, name),
                annotation=info.annotation,
            )
            for name, info in model_fields.items()
        )
        return EntityDescriptor(
            type_name=entity_type.__name__,
            table_name=meta["table"],
            schema_name=meta["schema"],
            fields=fields,
        )


# ============================================================================
# ANNOTATION CLASSIFICATION
# ============================================================================

@dataclass(frozen=True)
class FieldClassification:
    """What a field annotation refers to."""
    enum_type: Optional[Type[Enum]] = None          # column holding an enum
    related_types: Tuple[Any, ...] = ()             # model types to traverse


def _unwrap_optional(annotation: Any) -> Any:
    """Strip Annotated[...] and Optional[...] wrappers."""
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or origin is UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            if len(args) != 1:
                raise DiscoveryIncompleteError(f"Ambiguous union annotation: {annotation!r}")
            annotation = args[0]
            continue
        return annotation


def classify_annotation(annotation: Any) -> FieldClassification:
    """
    Classify a field annotation.

    Raises:
        DiscoveryIncompleteError: Forward references and unions of several
            non-None types cannot be classified
    """
    inner = _unwrap_optional(annotation)
    if isinstance(inner, (str, typing.ForwardRef)):
        raise DiscoveryIncompleteError(f"Unresolved forward reference: {annotation!r}")

    if is_lookup_enum(inner):
        return FieldClassification(enum_type=inner)

    origin = get_origin(inner)
    if origin in _COLLECTION_ORIGINS or origin in _MAPPING_ORIGINS:
        args = get_args(inner)
        if origin in _MAPPING_ORIGINS:
            args = args[1:]
        related: List[Any] = []
        for arg in args:
            if arg is Ellipsis:
                continue
            element = _unwrap_optional(arg)
            # Collections of enums are JSON, not relational columns
            if isinstance(element, type) and issubclass(element, BaseModel):
                related.append(element)
            elif get_origin(element) is not None:
                related.extend(classify_annotation(element).related_types)
        return FieldClassification(related_types=tuple(related))

    if isinstance(inner, type) and not issubclass(inner, Enum):
        return FieldClassification(related_types=(inner,))

    return FieldClassification()


# ============================================================================
# DISCOVERER
# ============================================================================

class ReferenceDiscoverer:
    """
    Walk the model graph and collect enum references.

    Traversal is breadth-first from the reflector's roots and guarded by a
    visited set, so cyclic models terminate. Fields that cannot be classified
    are skipped with a warning.
    """

    def __init__(self, reflector: ModelReflector):
        self.reflector = reflector

    def discover(self) -> DiscoveryResult:
        enum_types: Dict[Type[Enum], None] = {}
        edges: List[ForeignKeyEdge] = []
        skipped: List[str] = []

        visited = set()
        queue = deque(self.reflector.root_types())

        while queue:
            candidate = queue.popleft()
            if candidate in visited:
                continue
            visited.add(candidate)

            try:
                entity = self.reflector.describe(candidate)
            except DiscoveryIncompleteError as e:
                logger.warning(f"Skipping entity {getattr(candidate, '__name__', candidate)}: {e}")
                skipped.append(str(getattr(candidate, "__name__", candidate)))
                continue

            if entity is None:
                continue

            with log_context(table=entity.table_name):
                for fd in entity.fields:
                    try:
                        classification = classify_annotation(fd.annotation)
                    except DiscoveryIncompleteError as e:
                        logger.warning(f"Skipping field {entity.type_name}.{fd.name}: {e}")
                        skipped.append(f"{entity.type_name}.{fd.name}")
                        continue

                    for related in classification.related_types:
                        if related not in visited:
                            queue.append(related)

                    if classification.enum_type is None:
                        continue

                    if not entity.is_storage_entity:
                        logger.debug(
                            f"{entity.type_name}.{fd.name} is inside a value object, no foreign key"
                        )
                        continue

                    enum_type = classification.enum_type
                    enum_types.setdefault(enum_type, None)
                    edges.append(ForeignKeyEdge(
                        referencing_table=entity.table_name,
                        referencing_field=fd.column_name,
                        enum_type_name=enum_type.__name__,
                        referencing_schema=entity.schema_name,
                    ))
                    logger.debug(
                        f"Found enum reference {entity.table_name}.{fd.column_name} -> {enum_type.__name__}",
                        extra={"column": fd.column_name, "enum": enum_type.__name__},
                    )

        if not edges:
            logger.info("No enum references found in model")
        else:
            logger.info(
                f"Discovered {len(edges)} enum references to {len(enum_types)} enum types "
                f"across {len(visited)} types"
            )

        return DiscoveryResult(
            enum_types=tuple(enum_types),
            edges=tuple(edges),
            skipped=tuple(skipped),
        )


__all__ = [
    "FieldDescriptor",
    "EntityDescriptor",
    "DiscoveryResult",
    "ModelReflector",
    "PydanticModelReflector",
    "FieldClassification",
    "classify_annotation",
    "ReferenceDiscoverer",
]
