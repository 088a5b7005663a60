"""Verification of signed, compressed data packages.

A package is a zlib- or gzip-compressed JSON object holding ``data``,
``signature`` (base64 RSA PKCS#1 v1.5 / SHA-256 over ``data``) and
``signingPublicKeyDigest`` (base64 SHA-256 of the base64 public key text).
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import zlib

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

SANITY_CHECK_SIZE = 100 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024


class PackageVerificationError(Exception):
    """Raised when a signed data package cannot be decoded or verified."""


def public_key_digest(signature_public_key: str) -> str:
    """Return the base64 SHA-256 digest of the base64 public key text."""
    digest = hashlib.sha256(signature_public_key.encode("ascii")).digest()
    return base64.b64encode(digest).decode("ascii")


def _decompress(signed_package: bytes, gzipped: bool) -> bytes:
    wbits = 16 + zlib.MAX_WBITS if gzipped else zlib.MAX_WBITS
    kind = "gunzip" if gzipped else "inflate"
    decompressor = zlib.decompressobj(wbits)
    output = bytearray()
    pending = signed_package
    try:
        while True:
            output += decompressor.decompress(pending, _CHUNK_SIZE)
            if len(output) > SANITY_CHECK_SIZE:
                raise PackageVerificationError(f"{kind} overflow")
            pending = decompressor.unconsumed_tail
            if not pending:
                break
        output += decompressor.flush()
    except zlib.error as exc:
        raise PackageVerificationError(f"{kind} failed: {exc}") from exc
    if not decompressor.eof:
        raise PackageVerificationError(f"{kind} failed: truncated stream")
    if len(output) > SANITY_CHECK_SIZE:
        raise PackageVerificationError(f"{kind} overflow")
    if gzipped and not output:
        raise PackageVerificationError("gunzip produced no data")
    return bytes(output)


def _string_field(entry: dict, name: str) -> str:
    value = entry.get(name)
    if not isinstance(value, str):
        raise PackageVerificationError(f"JSON field {name!r} missing or not a string")
    return value


def _load_public_key(signature_public_key: str) -> rsa.RSAPublicKey:
    try:
        der = base64.b64decode(signature_public_key)
        key = serialization.load_der_public_key(der)
    except (binascii.Error, ValueError) as exc:
        raise PackageVerificationError(f"invalid public key: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise PackageVerificationError("public key is not an RSA key")
    return key


def verify_signed_data_package(
    signature_public_key: str, signed_package: bytes, gzipped: bool
) -> str:
    """Decompress and verify a signed package, returning its authentic data.

    Raises PackageVerificationError if any step fails.
    """
    json_bytes = _decompress(signed_package, gzipped)

    try:
        entry = json.loads(json_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PackageVerificationError(f"JSON parse failed: {exc}") from exc
    if not isinstance(entry, dict):
        raise PackageVerificationError("JSON parse failed: not an object")

    data = _string_field(entry, "data")
    base64_signature = _string_field(entry, "signature")
    signing_key_digest = _string_field(entry, "signingPublicKeyDigest")

    if public_key_digest(signature_public_key) != signing_key_digest:
        raise PackageVerificationError("public key mismatch; this build must be too old")

    key = _load_public_key(signature_public_key)
    try:
        signature = base64.b64decode(base64_signature)
    except binascii.Error as exc:
        raise PackageVerificationError(f"invalid signature encoding: {exc}") from exc

    try:
        key.verify(signature, data.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature as exc:
        raise PackageVerificationError("signature verification failed") from exc

    return data