"""
Payload registry — picks a payload type from a manifest's kind/version.

    registry = PayloadRegistry()

    @registry.register("cpu", 1)
    class CpuMetrics(BaseModel):
        interval_seconds: int
        idle_percent: list[int]

    envelope = registry.decode(blob)
"""

import logging
from typing import Any, Callable, Optional, Union

from intermodal.codec import Blob, Format, decode_envelope, decode_header
from intermodal.errors import UnknownPayloadError
from intermodal.models.envelope import Envelope
from intermodal.models.manifest import Manifest

_LOGGER = logging.getLogger(__name__)

_Key = tuple[Optional[str], str, int]


class PayloadRegistry:
    """Maps (domain, kind, version) to payload types.

    A registration without a domain matches any domain; a domain-specific
    registration wins over it.
    """

    def __init__(self) -> None:
        self._types: dict[_Key, type] = {}

    def register(
        self,
        kind: str,
        version: int,
        payload_type: Optional[type] = None,
        domain: Optional[str] = None,
    ) -> Union[type, Callable[[type], type]]:
        """Register a payload type. Without `payload_type`, returns a class decorator."""
        if payload_type is None:
            def decorator(cls: type) -> type:
                self.register(kind, version, cls, domain=domain)
                return cls
            return decorator
        key = (domain, kind, version)
        previous = self._types.get(key)
        if previous is not None and previous is not payload_type:
            _LOGGER.warning(
                "%s replaces %s for %s/%s v%d", payload_type.__name__, previous.__name__, domain or "*", kind, version
            )
        self._types[key] = payload_type
        _LOGGER.debug("registered %s for %s/%s v%d", payload_type.__name__, domain or "*", kind, version)
        return payload_type

    def __contains__(self, manifest: Manifest) -> bool:
        return self._lookup(manifest) is not None

    def __len__(self) -> int:
        return len(self._types)

    def _lookup(self, manifest: Manifest) -> Optional[type]:
        found = self._types.get((manifest.domain, manifest.kind, manifest.version))
        if found is None:
            found = self._types.get((None, manifest.kind, manifest.version))
        return found

    def resolve(self, manifest: Manifest) -> type:
        payload_type = self._lookup(manifest)
        if payload_type is None:
            raise UnknownPayloadError(
                f"No payload type registered for {manifest.domain}/{manifest.kind} v{manifest.version}",
                details={"domain": manifest.domain, "kind": manifest.kind, "version": manifest.version},
            )
        return payload_type

    def decode(self, blob: Blob, fmt: Format = Format.JSON) -> Envelope[Any]:
        """Read the header, pick the payload type, then decode the full envelope."""
        header = decode_header(blob, fmt)
        payload_type = self.resolve(header.manifest)
        return decode_envelope(blob, payload_type, fmt)
