"""
Header and Envelope — the outer shapes every intermodal message decodes into.

Any encoded envelope decodes into a `Header` regardless of its payload, since
unknown fields are ignored. Generic handlers read the header first, use the
manifest's kind/version to pick a payload type, then decode the same blob again
into `Envelope[T]`.
"""

from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from intermodal.models.manifest import Manifest

T = TypeVar("T")


class Header(BaseModel):
    """A manifest-only envelope."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    manifest: Manifest

    @classmethod
    def from_manifest(cls, manifest: Manifest) -> "Header":
        return cls(manifest=manifest)

    @classmethod
    def from_envelope(cls, envelope: "Envelope[Any]") -> "Header":
        """Drop the payload. The payload is never inspected."""
        return cls(manifest=envelope.manifest)


class Envelope(BaseModel, Generic[T]):
    """A manifest paired with a payload of type T."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    manifest: Manifest
    # "content" is the older wire name; it is read but never written
    payload: T = Field(validation_alias=AliasChoices("payload", "content"))

    @classmethod
    def from_header(cls, header: Header, payload: T) -> "Envelope[T]":
        """Attach a payload to a previously extracted header."""
        return cls(manifest=header.manifest, payload=payload)

    def header(self) -> Header:
        return Header.from_envelope(self)
