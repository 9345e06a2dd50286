"""
Storage Module
==============

Proof attachment storage backends.

Usage:
    from shared.storage import build_proof_store, build_proof_resolver

    store = build_proof_store(settings.storage)
    reference = await store.save(vendor_id, "policy.pdf", "application/pdf", content)

    resolver = build_proof_resolver(settings.storage)
    resolved = await resolver.resolve(reference)
"""

from shared.storage.proofs import (
    InlineProofStore,
    LocalProofStore,
    ObjectProofStore,
    ProofNotFoundError,
    ProofResolver,
    ProofStorageError,
    ProofStore,
    ResolvedProof,
    build_proof_resolver,
    build_proof_store,
    safe_filename,
)


__all__ = [
    "ProofStore",
    "InlineProofStore",
    "LocalProofStore",
    "ObjectProofStore",
    "ProofResolver",
    "ResolvedProof",
    "ProofStorageError",
    "ProofNotFoundError",
    "build_proof_store",
    "build_proof_resolver",
    "safe_filename",
]
