"""RSA request signing, response verification and sign-content building."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

__all__ = [
    "AuthError",
    "load_private_key",
    "sign_with_rsa",
    "verify_with_rsa",
    "get_sign_content",
]


class AuthError(Exception):
    """Raised when a key cannot be used or a signature does not check out."""


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.strip(), validate=True)


def _as_rsa(key: object) -> rsa.RSAPrivateKey | None:
    return key if isinstance(key, rsa.RSAPrivateKey) else None


def load_private_key(key_str: str) -> rsa.RSAPrivateKey:
    """Load an RSA private key.

    Accepts PKCS#1 PEM, PKCS#8 PEM, or bare base64 DER in either layout.
    """
    if not key_str:
        raise AuthError("private key must not be empty")

    loaders = [lambda: serialization.load_pem_private_key(key_str.encode(), password=None)]
    try:
        der_bytes = _b64decode(key_str)
    except (binascii.Error, ValueError):
        der_bytes = None
    if der_bytes is not None:
        loaders.append(lambda: serialization.load_der_private_key(der_bytes, password=None))

    for loader in loaders:
        try:
            key = _as_rsa(loader())
        except (ValueError, TypeError, UnsupportedAlgorithm):
            continue
        if key is not None:
            return key

    raise AuthError(
        "cannot parse private key: not a valid PKCS#1 or PKCS#8 PEM, or base64 DER"
    )


def sign_with_rsa(private_key_str: str, content: str) -> str:
    """Sign ``content`` with SHA1withRSA and return the base64 signature."""
    private_key = load_private_key(private_key_str)
    signature = private_key.sign(content.encode(), padding.PKCS1v15(), hashes.SHA1())
    return base64.b64encode(signature).decode("ascii")


def verify_with_rsa(public_key_str: str, content: str, signature_b64: str) -> bool:
    """Check a SHA1withRSA signature against a base64 DER public key.

    Returns ``True`` on success and raises :class:`AuthError` otherwise.
    """
    if not public_key_str:
        raise AuthError("public key must not be empty")
    if not signature_b64:
        raise AuthError("signature must not be empty")

    try:
        der_bytes = _b64decode(public_key_str)
    except (binascii.Error, ValueError) as exc:
        raise AuthError(f"failed to decode public key base64: {exc}") from exc

    try:
        public_key = serialization.load_der_public_key(der_bytes)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise AuthError(f"failed to parse public key: {exc}") from exc
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise AuthError("failed to parse public key: not an RSA key")

    try:
        sig_bytes = _b64decode(signature_b64)
    except (binascii.Error, ValueError) as exc:
        raise AuthError(f"failed to decode signature base64: {exc}") from exc

    try:
        public_key.verify(sig_bytes, content.encode(), padding.PKCS1v15(), hashes.SHA1())
    except InvalidSignature as exc:
        raise AuthError("response signature verification failed") from exc
    return True


def get_sign_content(params: Mapping[str, str]) -> str:
    """Join parameters as ``key=value`` pairs, sorted by key, with ``&``."""
    return "&".join(f"{key}={value}" for key, value in sorted(params.items()))