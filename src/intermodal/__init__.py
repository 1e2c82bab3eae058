"""
intermodal — a common envelope for structured messages.

Pairs arbitrary payloads with a manifest (domain, scope, kind, version,
origin, creation time, labels) so routers and storage writers can decide
what a message is without knowing its schema.
"""

from intermodal.codec import Format, decode, decode_envelope, decode_header, encode, load
from intermodal.dispatch import PayloadRegistry
from intermodal.errors import IntermodalError, DecodeError, UnknownPayloadError
from intermodal.models.envelope import Envelope, Header
from intermodal.models.manifest import Manifest

__version__ = "0.1.0"
__all__ = [
    "Manifest",
    "Header",
    "Envelope",
    "PayloadRegistry",
    "Format",
    "encode",
    "decode",
    "decode_header",
    "decode_envelope",
    "load",
    "IntermodalError",
    "DecodeError",
    "UnknownPayloadError",
]
