"""Taxonomy resolution service: version/tree lifecycle and public lookups."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from application.constants import (
    ATTRIBUTE_BY_ID_PATH,
    ATTRIBUTE_IDENTIFIERS_KEY,
    ATTRIBUTES_BY_IDS_PATH,
    TAXONOMY_ID_PARAM,
    TREE_PATH,
    VERSION_PATH,
)
from application.resolution import IdResolver
from application.value_lists import ValueListBuilder
from domain.errors import MalformedResponse
from domain.schemas import (
    AttributeDetails,
    AttributeMetadata,
    EccairsAttribute,
    EccairsEntity,
    EccairsValue,
    NodeKind,
    TaxonomyVersionInfo,
)
from domain.taxonomy import TaxonomyTree, parse_taxonomy_tree
from infrastructure.config.models import ServiceConfig
from infrastructure.observability.logging import (
    clear_operation_context,
    clear_version_context,
    set_log_context,
)
from infrastructure.transport import Transport, decode_envelope, make_transport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True)
class LoadedTaxonomy:
    """Everything materialized by initialization; replaced wholesale on reset."""

    version: TaxonomyVersionInfo
    tree: TaxonomyTree
    resolver: IdResolver


class TaxonomyResolutionService:
    """
    Read-through client for the ECCAIRS taxonomy service.

    Lifecycle:
    - UNINITIALIZED until the first public call, which loads the current
      version and then the full tree for it (exactly once, under a lock)
    - READY until reset(), which discards version, tree and id cache

    Every public lookup takes an external taxonomy code (e.g. 431 for
    attribute A-431), resolves it to the service's internal id through the
    loaded tree, then queries the service by that id.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport
        self._value_lists = ValueListBuilder(transport)
        self._lock = threading.RLock()
        self._loaded: LoadedTaxonomy | None = None

    @classmethod
    def from_cfg(cls, cfg: ServiceConfig, *, use_mock: bool = False) -> "TaxonomyResolutionService":
        return cls(make_transport(cfg, use_mock=use_mock))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> ServiceState:
        return ServiceState.READY if self._loaded is not None else ServiceState.UNINITIALIZED

    def is_initialized(self) -> bool:
        return self._loaded is not None

    def reset(self) -> None:
        """Return to UNINITIALIZED; the next public call reloads version and tree."""
        with self._lock:
            if self._loaded is not None:
                logger.info(
                    "Discarding taxonomy %s and %d cached ids",
                    self._loaded.version.label,
                    len(self._loaded.resolver),
                )
            self._loaded = None
            clear_version_context()

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "TaxonomyResolutionService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_initialized(self) -> LoadedTaxonomy:
        loaded = self._loaded
        if loaded is not None:
            return loaded
        with self._lock:
            if self._loaded is None:
                self._loaded = self._load()
            return self._loaded

    def _load(self) -> LoadedTaxonomy:
        version = self._load_version()
        set_log_context(version=version.label)
        tree = self._load_tree()
        logger.info("Loaded taxonomy %s (id=%d): %d tree nodes", version.label, version.id, len(tree))
        return LoadedTaxonomy(version=version, tree=tree, resolver=IdResolver(tree))

    def _load_version(self) -> TaxonomyVersionInfo:
        data = decode_envelope(self.transport.get(VERSION_PATH)).data
        try:
            return TaxonomyVersionInfo.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(f"Invalid taxonomy version payload: {e}") from e

    def _load_tree(self) -> TaxonomyTree:
        data = decode_envelope(self.transport.get(TREE_PATH)).data
        tree = parse_taxonomy_tree(data)
        if not len(tree):
            logger.warning("Taxonomy tree document contains no nodes")
        return tree

    @contextmanager
    def _operation(self, name: str) -> Iterator[LoadedTaxonomy]:
        set_log_context(operation=name)
        try:
            yield self._ensure_initialized()
        finally:
            clear_operation_context()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_taxonomy_version(self) -> str:
        """Current taxonomy version label, e.g. '5.1.1.2'."""
        with self._operation("version") as loaded:
            return loaded.version.label

    def get_taxonomy_version_id(self) -> int:
        """Service-internal id of the current taxonomy version."""
        with self._operation("version-id") as loaded:
            return loaded.version.id

    def has_hierarchical_value_list(self, attribute_code: int) -> bool:
        """
        Check whether the attribute's value list has more than one level.

        Returns False (rather than failing) when the attribute has no value list.
        """
        with self._operation("hierarchical") as loaded:
            internal_id = loaded.resolver.resolve_id(attribute_code, NodeKind.ATTRIBUTE)
            body = self.transport.get(
                ATTRIBUTE_BY_ID_PATH.format(internal_id=internal_id),
                params={TAXONOMY_ID_PARAM: loaded.version.id},
            )
            metadata = self._parse(AttributeMetadata, decode_envelope(body).data, "attribute metadata")
            value_list = metadata.attribute_value_list
            if value_list is None or value_list.levels is None:
                logger.debug("Attribute %d does not have a value list.", attribute_code)
                return False
            return value_list.levels > 1

    def get_value_list(self, attribute_code: int) -> list[EccairsValue]:
        """Ordered (possibly hierarchical) list of selectable values of the attribute."""
        with self._operation("values") as loaded:
            logger.debug("Loading value list of attribute %d.", attribute_code)
            internal_id = loaded.resolver.resolve_id(attribute_code, NodeKind.ATTRIBUTE)
            return self._value_lists.build(internal_id)

    def get_parent_entity(self, attribute_code: int) -> EccairsEntity:
        """Entity owning the attribute, e.g. Occurrence (24) for Event phase (431)."""
        with self._operation("parent-entity") as loaded:
            internal_id = loaded.resolver.resolve_id(attribute_code, NodeKind.ATTRIBUTE)
            body = self.transport.post(
                ATTRIBUTES_BY_IDS_PATH,
                {ATTRIBUTE_IDENTIFIERS_KEY: [internal_id], TAXONOMY_ID_PARAM: loaded.version.id},
            )
            data = decode_envelope(body).data
            if not isinstance(data, list):
                raise MalformedResponse(f"Expected a list of attributes, got {type(data).__name__}")

            records = [self._parse(AttributeDetails, raw, "attribute record") for raw in data]
            parents = {r.entity.id: r.entity for r in records if r.id == internal_id and r.entity is not None}
            if len(parents) != 1:
                raise MalformedResponse(
                    f"Expected exactly one parent entity for attribute {attribute_code}, found {len(parents)}"
                )
            return next(iter(parents.values()))

    def get_entity(self, entity_code: int) -> EccairsEntity:
        """Entity record built from the tree node with the given taxonomy code."""
        with self._operation("entity") as loaded:
            node = loaded.resolver.find_node(entity_code, NodeKind.ENTITY)
            return EccairsEntity(id=node.id, taxonomy_code=node.taxonomy_code, label=node.label, xsd_tag=node.xsd_tag)

    def get_attribute(self, attribute_code: int) -> EccairsAttribute:
        """Attribute record built from the tree node with the given taxonomy code."""
        with self._operation("attribute") as loaded:
            node = loaded.resolver.find_node(attribute_code, NodeKind.ATTRIBUTE)
            return EccairsAttribute(
                id=node.id, taxonomy_code=node.taxonomy_code, label=node.label, xsd_tag=node.xsd_tag
            )

    @staticmethod
    def _parse(model: type[M], raw: Any, what: str) -> M:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise MalformedResponse(f"Invalid {what}: {e}") from e
