"""Bearer-token identity for callable invocations.

Tokens are compact JWEs (alg=dir, enc=A256GCM) whose content key is derived
from ``AUTH_SECRET`` with HKDF-SHA256. The decrypted claims must carry a
``uid``.
"""
from __future__ import annotations

import base64
import json
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from functions.errors import HttpsError
from functions.models.schemas import CallableContext

_KEY_INFO = b"ping-functions identity key"
_HEADER = {"alg": "dir", "enc": "A256GCM"}


def _derive_key(secret: str) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=b"",
        info=_KEY_INFO,
    ).derive(secret.encode())


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(s: str) -> bytes:
    return base64.urlsafe_b64decode(s + "=" * (-len(s) % 4))


def issue_token(claims: dict, secret: str) -> str:
    """Encrypt ``claims`` into a compact JWE accepted by ``resolve_context``."""
    header_b64 = _b64url_encode(json.dumps(_HEADER, separators=(",", ":")).encode())
    iv = os.urandom(12)
    sealed = AESGCM(_derive_key(secret)).encrypt(
        iv, json.dumps(claims).encode(), header_b64.encode("ascii")
    )
    # AESGCM appends the 16-byte tag to the ciphertext
    ciphertext, tag = sealed[:-16], sealed[-16:]
    return ".".join([header_b64, "", _b64url_encode(iv), _b64url_encode(ciphertext), _b64url_encode(tag)])


def decrypt_token(token: str, secret: str) -> dict:
    """Decrypt a compact JWE and return its claims.

    Raises:
        ValueError: If the token is malformed
        cryptography.exceptions.InvalidTag: If it was not sealed with ``secret``
    """
    parts = token.split(".")
    if len(parts) != 5:
        raise ValueError(f"JWE must have 5 parts, got {len(parts)}")

    header_b64, _enc_key_b64, iv_b64, ciphertext_b64, tag_b64 = parts
    iv = _b64url_decode(iv_b64)
    ciphertext = _b64url_decode(ciphertext_b64)
    tag = _b64url_decode(tag_b64)

    # AAD is the ASCII bytes of the protected header
    plaintext = AESGCM(_derive_key(secret)).decrypt(iv, ciphertext + tag, header_b64.encode("ascii"))
    claims = json.loads(plaintext)
    if not isinstance(claims, dict):
        raise ValueError("JWE claims must be an object")
    return claims


def resolve_context(authorization: str | None, secret: str | None) -> CallableContext:
    """Turn an Authorization header into the caller's identity context.

    Args:
        authorization: Authorization header value
        secret: Token secret, usually ``Settings.auth_secret``

    Returns:
        Context with ``uid`` set for a valid token, ``uid=None`` if no header was sent

    Raises:
        HttpsError: If the header or token is invalid
    """
    if not authorization:
        return CallableContext()

    if not authorization.startswith("Bearer "):
        raise HttpsError("unauthenticated", "Invalid Authorization header format")

    token = authorization[7:]  # Remove "Bearer " prefix

    if not secret:
        raise HttpsError("internal", "Auth secret not configured")

    try:
        claims = decrypt_token(token, secret)
    except Exception as e:
        raise HttpsError("unauthenticated", "Invalid token") from e

    uid = claims.get("uid")
    if not isinstance(uid, str) or not uid:
        raise HttpsError("unauthenticated", "Invalid token: missing uid")

    return CallableContext(uid=uid)
