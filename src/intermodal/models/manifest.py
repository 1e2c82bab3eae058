"""
Manifest — the metadata block carried by every envelope.

The manifest is used by application code that routes, stores and processes
data. It says what type of data it is and which schema it implements, who
produced it, and when. Extra context travels as string key/value labels.

Example (YAML):

    manifest:
      domain: example.org
      scope: metrics/applications/some-app
      kind: useractions
      version: 2
      origin: some-app-03.example.org
      ctime: 2020-08-25T14:41:40Z
      labels:
        app-version: 2.3.1

A manifest never changes once built, labels included; `replace` and
`with_labels` return new values.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Optional

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
)

if TYPE_CHECKING:
    from intermodal.models.envelope import Envelope, Header


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Manifest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    domain: str             # DNS name of the organization owning the schema
    scope: str              # namespace element, conventionally a path
    kind: str               # payload type name
    version: Annotated[int, Field(strict=True, ge=0)]  # schema version of `kind`
    origin: str             # identity of the source
    ctime: AwareDatetime    # when the envelope was created, not the observation
    labels: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("ctime", mode="before")
    @classmethod
    def _naive_datetime_is_utc(cls, value: Any) -> Any:
        # YAML loaders may hand over native datetimes with the zone stripped.
        # Strings still have to carry their own designator.
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("ctime")
    @classmethod
    def _normalize_ctime(cls, value: datetime) -> datetime:
        return value.astimezone(timezone.utc)

    @field_validator("labels")
    @classmethod
    def _read_only_labels(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("ctime", when_used="json")
    def _serialize_ctime(self, value: datetime) -> str:
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    @field_serializer("labels")
    def _serialize_labels(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @model_serializer(mode="wrap")
    def _omit_empty_labels(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if not self.labels:
            data.pop("labels", None)
        return data

    def __hash__(self) -> int:
        return hash(
            (self.domain, self.scope, self.kind, self.version, self.origin, self.ctime,
             frozenset(self.labels.items()))
        )

    def __deepcopy__(self, memo: Optional[dict[int, Any]] = None) -> "Manifest":
        # immutable; the labels proxy cannot be deep-copied anyway
        return self

    @classmethod
    def create(
        cls,
        domain: str,
        scope: str,
        kind: str,
        version: int,
        origin: str,
        ctime: Optional[datetime] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> "Manifest":
        """Build a manifest, stamping ctime with the current UTC time if omitted."""
        return cls(
            domain=domain,
            scope=scope,
            kind=kind,
            version=version,
            origin=origin,
            ctime=ctime or utc_now(),
            labels=dict(labels or {}),
        )

    @classmethod
    def from_envelope(cls, envelope: "Envelope[Any]") -> "Manifest":
        return envelope.manifest

    @classmethod
    def from_header(cls, header: "Header") -> "Manifest":
        return header.manifest

    def replace(self, **fields: Any) -> "Manifest":
        """Return a new manifest with the given fields swapped in.

        Raises TypeError for names that are not manifest fields.
        """
        unknown = sorted(set(fields) - set(type(self).model_fields))
        if unknown:
            raise TypeError(f"Manifest has no field(s): {', '.join(unknown)}")
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data["labels"] = dict(self.labels)
        data.update(fields)
        return type(self).model_validate(data)

    def with_labels(self, **labels: str) -> "Manifest":
        """Return a new manifest with labels merged over the existing ones."""
        return self.replace(labels={**self.labels, **labels})
