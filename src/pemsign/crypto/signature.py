"""Signer/verifier bound to one algorithm and one key.

``Signature`` follows the usual provider lifecycle: construct with an
algorithm id, ``init`` with a key, ``update`` with the payload, then ``sign``
or ``verify``. ``execute`` wires that together for the orchestrator.

Signatures travel as lowercase hex strings. ``bytes`` passed to ``verify``
are taken as the raw signature.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa

from ..exceptions import KeyRoleError, MissingSignatureError, UnhandledActionError
from ..models import Action, KeyRole, Payload, ResolvedKey, Result
from .algorithms import DSA, ECDSA, RSA, RSA_PSS, SignatureScheme, get_scheme

log = structlog.get_logger(__name__)

# Total mapping used when the caller does not name an action.
ROLE_ACTIONS: Dict[KeyRole, Action] = {
    KeyRole.PRIVATE: Action.SIGN,
    KeyRole.PUBLIC: Action.VERIFY,
    KeyRole.CERTIFICATE: Action.VERIFY,
}

_FAMILY_KEY_TYPES: Dict[str, Tuple[type, ...]] = {
    RSA: (rsa.RSAPrivateKey, rsa.RSAPublicKey),
    RSA_PSS: (rsa.RSAPrivateKey, rsa.RSAPublicKey),
    ECDSA: (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey),
    DSA: (dsa.DSAPrivateKey, dsa.DSAPublicKey),
}


def infer_action(role: KeyRole) -> Action:
    try:
        return ROLE_ACTIONS[role]
    except KeyError:
        raise UnhandledActionError(f"Unhandled signature state for key role: {role}") from None


def _to_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _decode_signature(signature: Payload) -> Optional[bytes]:
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    try:
        return bytes.fromhex("".join(signature.split()))
    except ValueError:
        return None


class Signature:
    def __init__(self, algorithm: str) -> None:
        self.scheme: SignatureScheme = get_scheme(algorithm)
        self._key: Optional[ResolvedKey] = None
        self._chunks: list[bytes] = []

    @property
    def state(self) -> Action:
        """Action implied by the bound key's role."""
        if self._key is None:
            return Action.UNSPECIFIED
        return infer_action(self._key.role)

    def init(self, key: ResolvedKey) -> None:
        accepted = _FAMILY_KEY_TYPES[self.scheme.family]
        if not isinstance(key.key, accepted):
            raise KeyRoleError(
                f"{type(key.key).__name__} cannot be used with {self.scheme.name}"
            )
        self._key = key
        self._chunks = []

    def update(self, payload: Payload) -> None:
        self._chunks.append(_to_bytes(payload))

    def _require_key(self) -> ResolvedKey:
        if self._key is None:
            raise KeyRoleError("Signature used before init()")
        return self._key

    def sign(self) -> str:
        key = self._require_key()
        if key.role is not KeyRole.PRIVATE:
            raise KeyRoleError(f"Signing requires a private key, got a {key.role.value} key")
        data = b"".join(self._chunks)
        h = self.scheme.hash()
        family = self.scheme.family
        try:
            if family == RSA:
                raw = key.key.sign(data, padding.PKCS1v15(), h)
            elif family == RSA_PSS:
                pss = padding.PSS(mgf=padding.MGF1(h), salt_length=padding.PSS.DIGEST_LENGTH)
                raw = key.key.sign(data, pss, h)
            elif family == ECDSA:
                raw = key.key.sign(data, ec.ECDSA(h))
            else:
                raw = key.key.sign(data, h)
        except (ValueError, TypeError) as exc:
            # e.g. a PSS digest plus salt that does not fit the modulus
            raise KeyRoleError(f"Cannot sign with {self.scheme.name}: {exc}") from exc
        return raw.hex()

    def verify(self, signature: Payload) -> bool:
        key = self._require_key()
        raw = _decode_signature(signature)
        if raw is None:
            log.debug("signature is not valid hex", algorithm=self.scheme.name)
            return False
        data = b"".join(self._chunks)
        public = key.public_key()
        h = self.scheme.hash()
        family = self.scheme.family
        try:
            if family == RSA:
                public.verify(raw, data, padding.PKCS1v15(), h)
            elif family == RSA_PSS:
                pss = padding.PSS(mgf=padding.MGF1(h), salt_length=padding.PSS.AUTO)
                public.verify(raw, data, pss, h)
            elif family == ECDSA:
                public.verify(raw, data, ec.ECDSA(h))
            else:
                public.verify(raw, data, h)
        except InvalidSignature:
            return False
        except (ValueError, TypeError) as exc:
            raise KeyRoleError(f"Cannot verify with {self.scheme.name}: {exc}") from exc
        return True


def execute(
    action: Action,
    algorithm: str,
    key: ResolvedKey,
    payload: Payload,
    signature: Optional[Payload] = None,
) -> Result:
    """Sign or verify ``payload``; UNSPECIFIED defers to the key's role."""
    sig = Signature(algorithm)
    sig.init(key)
    sig.update(payload)
    effective = action if action is not Action.UNSPECIFIED else sig.state
    log.debug("dispatching", action=effective.value, algorithm=algorithm, role=key.role.value)
    if effective is Action.SIGN:
        return sig.sign()
    if effective is Action.VERIFY:
        if signature is None:
            raise MissingSignatureError("Signature file not specified")
        return sig.verify(signature)
    raise UnhandledActionError(f"Unhandled action: {effective.value}")


__all__ = ["ROLE_ACTIONS", "Signature", "execute", "infer_action"]
