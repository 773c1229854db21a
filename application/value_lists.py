"""Hierarchical value-list assembly."""

import logging
from typing import Any

from pydantic import ValidationError

from application.constants import (
    ATTRIBUTES_LIST_PARAM,
    CHILD_VALUES_KEY,
    CHILD_VALUES_PATH,
    FIRST_LEVEL_VALUES_PATH,
    VALUES_MAP_KEY,
)
from domain.errors import MalformedResponse
from domain.schemas import EccairsValue, ValueListItem
from infrastructure.transport import Transport, decode_envelope, select

logger = logging.getLogger(__name__)


class ValueListBuilder:
    """
    Build the ordered value tree of an attribute.

    First-level values come from one call keyed by the attribute's internal id;
    every value flagged `hasChild` then gets its direct children from the
    children-LOV endpoint, depth-first, until no value reports children.
    Order within a level is kept exactly as returned by the service.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def build(self, attribute_internal_id: int) -> list[EccairsValue]:
        logger.debug("Loading value list of attribute id=%d.", attribute_internal_id)
        first_level = self._fetch_first_level(attribute_internal_id)
        return self._assemble(first_level, depth=1, ancestors=frozenset())

    def _fetch_first_level(self, attribute_internal_id: int) -> list[Any]:
        body = self.transport.get(
            FIRST_LEVEL_VALUES_PATH,
            params={ATTRIBUTES_LIST_PARAM: attribute_internal_id},
        )
        data = decode_envelope(body).data
        return self._as_list(select(data, VALUES_MAP_KEY, str(attribute_internal_id)))

    def _fetch_children(self, value_internal_id: int) -> list[Any]:
        body = self.transport.get(CHILD_VALUES_PATH.format(value_id=value_internal_id))
        data = decode_envelope(body).data
        return self._as_list(select(data, CHILD_VALUES_KEY))

    def _assemble(self, raw_items: list[Any], *, depth: int, ancestors: frozenset[int]) -> list[EccairsValue]:
        values: list[EccairsValue] = []
        for raw in raw_items:
            item = self._parse_item(raw)
            value = item.to_value()
            # Check the flag before calling out: leaves never trigger a children request
            if item.has_child:
                if item.internal_id in ancestors:
                    raise MalformedResponse(
                        f"Value {item.internal_id} is its own ancestor in the value hierarchy (depth {depth})"
                    )
                logger.debug("Loading children of value id=%d, level %d.", item.internal_id, depth + 1)
                children_raw = self._fetch_children(item.internal_id)
                value.children = self._assemble(
                    children_raw,
                    depth=depth + 1,
                    ancestors=ancestors | {item.internal_id},
                )
            values.append(value)
        return values

    @staticmethod
    def _parse_item(raw: Any) -> ValueListItem:
        try:
            return ValueListItem.model_validate(raw)
        except ValidationError as e:
            raise MalformedResponse(f"Invalid value list item: {e}") from e

    @staticmethod
    def _as_list(raw: Any) -> list[Any]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise MalformedResponse(f"Expected a list of values, got {type(raw).__name__}")
        return raw
