"""Pydantic models for taxonomy records and the wire payloads they are parsed from."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeKind(str, Enum):
    """Kind discriminator carried by every taxonomy tree node (`type` on the wire)."""

    ATTRIBUTE = "A"
    ENTITY = "E"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: object) -> "NodeKind":
        try:
            return cls(str(raw))
        except ValueError:
            return cls.OTHER


def _as_text(v: Any) -> str:
    return "" if v is None else str(v)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class TaxonomyVersionInfo(_WireModel):
    """Current taxonomy version, e.g. label '5.1.1.2' plus the service's internal id."""

    label: str = Field(..., alias="version")
    id: int


class _TaxonomyRecord(_WireModel):
    id: int
    taxonomy_code: int = Field(..., alias="tc")
    label: str = ""
    xsd_tag: str | None = Field(default=None, alias="xsdTag")

    @field_validator("label", mode="before")
    @classmethod
    def _label_as_text(cls, v: Any) -> str:
        return _as_text(v)


class TreeNode(_TaxonomyRecord):
    """One node of the taxonomy tree (attribute, entity or anything else)."""

    kind: NodeKind = Field(default=NodeKind.OTHER, alias="type")

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, v: object) -> NodeKind:
        return NodeKind.parse(v)


class EccairsAttribute(_TaxonomyRecord):
    """
    ECCAIRS attribute, a leaf classification field.

    `taxonomy_code` is the stable external code, e.g. 390 for Event type.
    `xsd_tag` can be used when generating E5X.
    """


class EccairsEntity(_TaxonomyRecord):
    """
    ECCAIRS entity, a structural grouping node owning zero or more attributes.

    `taxonomy_code` is the stable external code, e.g. 24 for Occurrence.
    """


class EccairsValue(BaseModel):
    """Single selectable value of an attribute's (possibly hierarchical) value list."""

    model_config = ConfigDict(extra="ignore")

    id: int
    description: str = ""
    detailed_description: str = ""
    explanation: str = ""
    level: str = ""
    domains: str | None = None
    # None at leaves; a list (possibly empty) for values flagged as having children
    children: list["EccairsValue"] | None = None


class ValueListItem(_WireModel):
    """Raw value node as returned by the first-level and children-LOV endpoints."""

    internal_id: int = Field(..., alias="id")
    identifier: int
    description: str = ""
    detailed: str = ""
    explanation: str = ""
    level: str = ""
    domains: str | None = None
    has_child: bool = Field(default=False, alias="hasChild")

    @field_validator("description", "detailed", "explanation", "level", mode="before")
    @classmethod
    def _fields_as_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("domains", mode="before")
    @classmethod
    def _domains_as_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("has_child", mode="before")
    @classmethod
    def _null_is_false(cls, v: Any) -> bool:
        return False if v is None else v

    def to_value(self) -> EccairsValue:
        return EccairsValue(
            id=self.identifier,
            description=self.description,
            detailed_description=self.detailed,
            explanation=self.explanation,
            level=self.level,
            domains=self.domains,
        )


class ValueListInfo(_WireModel):
    levels: int | None = None


class AttributeMetadata(_WireModel):
    """Subset of the attribute-by-id payload needed to inspect its value list."""

    id: int | None = None
    attribute_value_list: ValueListInfo | None = Field(default=None, alias="attributeValueList")


class AttributeDetails(_WireModel):
    """Attribute record returned by the batch lookup, carrying its parent entity."""

    id: int
    taxonomy_code: int | None = Field(default=None, alias="tc")
    label: str | None = None
    entity: EccairsEntity | None = None


EccairsValue.model_rebuild()
