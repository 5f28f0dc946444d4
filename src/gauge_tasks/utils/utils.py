# standard library
import datetime

from enum import Enum
from pathlib import Path

# third parties
from pydantic import BaseModel

# relative
from .types import JSON


def to_json_leaf(value) -> JSON:
    """
    Convert a leaf value to JSON; objects that are not serializable are replaced by `{}`.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Path, datetime.datetime)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, (set, tuple, frozenset)):
        return [to_json(v) for v in value]
    return {}


def to_json(obj) -> JSON:
    """
    Convert data attached to logs (pydantic models, dict, list, paths, enums) to JSON.
    """
    if isinstance(obj, BaseModel):
        return to_json(obj.model_dump())
    if isinstance(obj, dict):
        return {str(k): to_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_json(v) for v in obj]
    return to_json_leaf(obj)
