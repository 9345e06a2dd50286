"""
Proof Models
============

References to vendor-submitted evidence.

Version: 0.1.0
"""

from enum import Enum

from pydantic import BaseModel, Field


class ProofStorageKind(str, Enum):
    """Physical storage scheme of a proof, recorded per reference."""

    OBJECT = "object"  # S3-compatible bucket, locator is the object key
    INLINE = "inline"  # Locator is the base64 payload itself
    LOCAL = "local"  # Locator is a path relative to the upload directory
    URL = "url"  # Externally hosted, locator is an absolute URL


class ProofReference(BaseModel):
    """Opaque pointer to an uploaded artifact."""

    kind: ProofStorageKind
    locator: str = Field(..., min_length=1)
    content_type: str = "application/octet-stream"
    filename: str | None = None

    @classmethod
    def from_legacy(cls, value: str) -> "ProofReference":
        """
        Classify a legacy string proof.

        Older records stored a bare string whose prefix decided how it was
        served: an http(s) URL, a ``data:`` URL, or an ``/uploads/`` path.
        """
        if value.startswith("data:"):
            header, _, payload = value.partition(",")
            content_type = header[len("data:"):].split(";")[0] or "application/octet-stream"
            return cls(kind=ProofStorageKind.INLINE, locator=payload, content_type=content_type)

        if value.startswith("/uploads/"):
            return cls(kind=ProofStorageKind.LOCAL, locator=value[len("/uploads/"):])

        if value.startswith(("http://", "https://")):
            return cls(kind=ProofStorageKind.URL, locator=value)

        raise ValueError(f"Unrecognized proof format: {value[:32]}")
