"""Result serialization utilities."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def to_jsonable(result: Any) -> Any:
    """
    Convert a lookup result (model, list of models, or scalar) to plain JSON types.

    Leaf values keep `children: null` so a leaf is distinguishable from a
    value whose children list came back empty.
    """
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


def dump_result(result: Any, output_path: Path | None = None) -> str:
    """
    Render a lookup result as indented JSON; also write it to output_path when given.

    Returns:
        The JSON text
    """
    text = json.dumps(to_jsonable(result), ensure_ascii=False, indent=2)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        logger.info("Saved result JSON: %s", output_path)

    return text


def count_values(values: list[Any]) -> int:
    """Total number of values in a value tree, all levels included."""
    return sum(1 + count_values(v.children or []) for v in values)
