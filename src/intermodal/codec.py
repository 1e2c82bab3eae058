"""
Structured encode/decode for intermodal envelopes.

JSON goes through pydantic directly; YAML is parsed with PyYAML and then
validated by the same models, so both formats follow the same field rules:
unknown fields are ignored, missing required fields fail, empty labels are
left out of the output.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from intermodal.errors import DecodeError
from intermodal.models.envelope import Envelope, Header

_LOGGER = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
P = TypeVar("P")

Blob = Union[str, bytes]


class Format(str, Enum):
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Format":
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return cls.JSON
        if suffix in (".yaml", ".yml"):
            return cls.YAML
        raise DecodeError(
            f"Cannot tell the format of {path}: expected .json, .yaml or .yml",
            code="unknown_format",
            details={"path": str(path)},
        )


def encode(value: BaseModel, fmt: Format = Format.JSON, indent: Optional[int] = None) -> str:
    """Encode a model as JSON or YAML text."""
    fmt = Format(fmt)
    if fmt is Format.JSON:
        return value.model_dump_json(indent=indent)
    data = value.model_dump(mode="json")
    return yaml.safe_dump(data, sort_keys=False, indent=indent, allow_unicode=True)


def _parse(blob: Blob, fmt: Format) -> Any:
    try:
        if fmt is Format.JSON:
            return json.loads(blob)
        return yaml.safe_load(blob)
    except (json.JSONDecodeError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise DecodeError(f"Malformed {fmt.value}: {exc}", code="malformed_input") from exc


def decode(blob: Blob, model: type[M], fmt: Format = Format.JSON) -> M:
    """Decode text/bytes into `model`. Any failure raises DecodeError."""
    fmt = Format(fmt)
    data = _parse(blob, fmt)
    try:
        value = model.model_validate(data)
    except ValidationError as exc:
        _LOGGER.debug("decode into %s failed: %d error(s)", model.__name__, exc.error_count())
        raise DecodeError(
            f"Cannot decode {fmt.value} into {model.__name__}: {exc}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
    _LOGGER.debug("decoded %s blob into %s", fmt.value, model.__name__)
    return value


def decode_header(blob: Blob, fmt: Format = Format.JSON) -> Header:
    return decode(blob, Header, fmt)


def decode_envelope(blob: Blob, payload_type: type[P], fmt: Format = Format.JSON) -> Envelope[P]:
    return decode(blob, Envelope[payload_type], fmt)  # type: ignore[valid-type]


def load(path: Union[str, Path], model: type[M], fmt: Optional[Format] = None) -> M:
    """Read a file and decode it, picking the format from the suffix unless given."""
    path = Path(path)
    return decode(path.read_bytes(), model, fmt or Format.from_path(path))
