"""
Proof Storage
=============

Backends that store vendor evidence and resolve proof references.

Each stored proof records its ``ProofStorageKind``; resolution dispatches on
that kind rather than on the deployment the reader happens to run in, so a
record written by one backend stays readable after the backend changes.

Backends:
- ObjectProofStore: S3-compatible bucket (boto3), served by presigned URL
- InlineProofStore: base64 payload kept in the record itself
- LocalProofStore: files under a local upload directory

Version: 0.1.0
"""

import asyncio
import base64
import binascii
import re
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared.config import ProofBackend
from shared.config.settings import StorageSettings
from shared.logging import get_logger
from shared.models.proof import ProofReference, ProofStorageKind


logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


class ProofStorageError(Exception):
    """A storage backend failed or is not configured."""


class ProofNotFoundError(ProofStorageError):
    """The referenced artifact does not exist."""


@dataclass
class ResolvedProof:
    """A proof ready to be served: either bytes or a redirect."""

    content_type: str
    content: bytes | None = None
    redirect_url: str | None = None


def safe_filename(name: str) -> str:
    """Replace characters that are unsafe in paths and object keys."""
    return _UNSAFE_CHARS.sub("_", name) or "file"


class ProofStore(ABC):
    """Abstract proof storage backend."""

    kind: ProofStorageKind

    @abstractmethod
    async def save(
        self,
        vendor_id: str,
        filename: str,
        content_type: str,
        content: bytes,
    ) -> ProofReference:
        """Store an artifact and return its reference."""
        ...

    @abstractmethod
    async def fetch(self, reference: ProofReference) -> ResolvedProof:
        """Resolve a reference previously returned by ``save``."""
        ...


class InlineProofStore(ProofStore):
    """Keeps the artifact base64-encoded inside the assessment record."""

    kind = ProofStorageKind.INLINE

    async def save(
        self,
        vendor_id: str,
        filename: str,
        content_type: str,
        content: bytes,
    ) -> ProofReference:
        return ProofReference(
            kind=self.kind,
            locator=base64.b64encode(content).decode("ascii"),
            content_type=content_type,
            filename=filename,
        )

    async def fetch(self, reference: ProofReference) -> ResolvedProof:
        try:
            content = base64.b64decode(reference.locator, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ProofStorageError(f"Corrupt inline proof: {e}") from e
        return ResolvedProof(content_type=reference.content_type, content=content)


class LocalProofStore(ProofStore):
    """Stores artifacts as files under ``upload_dir``."""

    kind = ProofStorageKind.LOCAL

    def __init__(self, upload_dir: Path) -> None:
        self.upload_dir = upload_dir

    def _path_for(self, locator: str) -> Path:
        root = self.upload_dir.resolve()
        path = (root / locator).resolve()
        if root not in path.parents:
            raise ProofNotFoundError(f"Proof outside upload directory: {locator}")
        return path

    async def save(
        self,
        vendor_id: str,
        filename: str,
        content_type: str,
        content: bytes,
    ) -> ProofReference:
        locator = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}-{safe_filename(filename)}"
        path = self._path_for(locator)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise ProofStorageError(f"Could not write proof: {e}") from e

        logger.debug("proof_saved_local", vendor_id=vendor_id, locator=locator)
        return ProofReference(
            kind=self.kind,
            locator=locator,
            content_type=content_type,
            filename=filename,
        )

    async def fetch(self, reference: ProofReference) -> ResolvedProof:
        path = self._path_for(reference.locator)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise ProofNotFoundError(f"Proof file missing: {reference.locator}") from e
        except OSError as e:
            raise ProofStorageError(f"Could not read proof: {e}") from e
        return ResolvedProof(content_type=reference.content_type, content=content)


class ObjectProofStore(ProofStore):
    """Stores artifacts in an S3-compatible bucket."""

    kind = ProofStorageKind.OBJECT

    def __init__(
        self,
        bucket: str,
        prefix: str = "vendorshield/proofs",
        url_expiry_seconds: int = 300,
        client: Any | None = None,
        **client_kwargs: Any,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.url_expiry_seconds = url_expiry_seconds
        self._client = client
        self._client_kwargs = client_kwargs

    @property
    def client(self) -> Any:
        """Lazily created boto3 S3 client."""
        if self._client is None:
            self._client = boto3.client("s3", **self._client_kwargs)
            logger.info("s3_client_created", bucket=self.bucket)
        return self._client

    async def save(
        self,
        vendor_id: str,
        filename: str,
        content_type: str,
        content: bytes,
    ) -> ProofReference:
        key = f"{self.prefix}/{vendor_id}/{uuid.uuid4().hex}-{safe_filename(filename)}"
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
                Metadata={"vendor_id": vendor_id},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("proof_upload_failed", bucket=self.bucket, key=key, error=str(e))
            raise ProofStorageError(f"S3 upload failed: {e}") from e

        logger.debug("proof_saved_object", vendor_id=vendor_id, key=key)
        return ProofReference(
            kind=self.kind,
            locator=key,
            content_type=content_type,
            filename=filename,
        )

    async def fetch(self, reference: ProofReference) -> ResolvedProof:
        try:
            url = await asyncio.to_thread(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": reference.locator},
                ExpiresIn=self.url_expiry_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise ProofStorageError(f"Could not sign proof URL: {e}") from e
        return ResolvedProof(content_type=reference.content_type, redirect_url=url)


class ProofResolver:
    """Resolves any proof reference using the backend matching its kind."""

    def __init__(self, stores: list[ProofStore]) -> None:
        self._stores = {store.kind: store for store in stores}

    async def resolve(self, reference: ProofReference) -> ResolvedProof:
        """
        Resolve a reference for serving.

        Raises:
            ProofNotFoundError: artifact missing
            ProofStorageError: backend failed or not configured
        """
        if reference.kind == ProofStorageKind.URL:
            return ResolvedProof(content_type=reference.content_type, redirect_url=reference.locator)

        store = self._stores.get(reference.kind)
        if store is None:
            raise ProofStorageError(f"No backend configured for {reference.kind.value} proofs")
        return await store.fetch(reference)


def _object_store(storage: StorageSettings) -> ObjectProofStore:
    client_kwargs: dict[str, Any] = {"region_name": storage.region}
    if storage.access_key_id.get_secret_value():
        client_kwargs["aws_access_key_id"] = storage.access_key_id.get_secret_value()
        client_kwargs["aws_secret_access_key"] = storage.secret_access_key.get_secret_value()
    return ObjectProofStore(
        bucket=storage.bucket,
        prefix=storage.prefix,
        url_expiry_seconds=storage.presigned_url_expiry_seconds,
        **client_kwargs,
    )


def build_proof_store(storage: StorageSettings) -> ProofStore:
    """Backend used for new uploads."""
    if storage.backend == ProofBackend.OBJECT:
        if not storage.bucket:
            raise ProofStorageError("PROOF_STORAGE_BUCKET is required for object storage")
        return _object_store(storage)
    if storage.backend == ProofBackend.INLINE:
        return InlineProofStore()
    return LocalProofStore(storage.upload_dir)


def build_proof_resolver(storage: StorageSettings) -> ProofResolver:
    """Resolver able to read every kind the configuration allows."""
    stores: list[ProofStore] = [InlineProofStore(), LocalProofStore(storage.upload_dir)]
    if storage.bucket:
        stores.append(_object_store(storage))
    return ProofResolver(stores)
