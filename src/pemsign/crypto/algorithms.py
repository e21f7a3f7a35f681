"""Fixed provider table of signature algorithms.

Ids follow the Java/JCA naming (``<HASH>with<SCHEME>``). ``RSAandMGF1``
denotes RSASSA-PSS with MGF1 over the same hash.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from cryptography.hazmat.primitives import hashes

from ..exceptions import UnsupportedAlgorithmError

RSA = "RSA"
RSA_PSS = "RSA-PSS"
ECDSA = "ECDSA"
DSA = "DSA"


@dataclass(frozen=True, slots=True)
class SignatureScheme:
    name: str
    family: str
    hash_factory: Callable[[], hashes.HashAlgorithm]

    def hash(self) -> hashes.HashAlgorithm:
        return self.hash_factory()


_HASHES: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "MD5": hashes.MD5,
    "SHA": hashes.SHA1,
    "SHA1": hashes.SHA1,
    "SHA224": hashes.SHA224,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}

_SCHEME_SUFFIX = {
    RSA: "withRSA",
    RSA_PSS: "withRSAandMGF1",
    ECDSA: "withECDSA",
    DSA: "withDSA",
}

_TABLE = [
    (RSA, ("MD5", "SHA1", "SHA224", "SHA256", "SHA384", "SHA512")),
    (ECDSA, ("SHA1", "SHA224", "SHA256", "SHA384", "SHA512")),
    (DSA, ("SHA1", "SHA224", "SHA256")),
    (RSA_PSS, ("SHA", "SHA1", "SHA224", "SHA256", "SHA384", "SHA512")),
]


def _build_registry() -> Dict[str, SignatureScheme]:
    registry: Dict[str, SignatureScheme] = {}
    for family, hash_names in _TABLE:
        for hash_name in hash_names:
            name = hash_name + _SCHEME_SUFFIX[family]
            registry[name] = SignatureScheme(name=name, family=family, hash_factory=_HASHES[hash_name])
    return registry


ALGORITHMS: Dict[str, SignatureScheme] = _build_registry()


def list_algorithms() -> List[str]:
    return list(ALGORITHMS)


def is_supported(algorithm: Optional[str]) -> bool:
    return algorithm is not None and algorithm in ALGORITHMS


def get_scheme(algorithm: Optional[str]) -> SignatureScheme:
    """Look up ``algorithm`` or raise listing the valid ids."""
    if not is_supported(algorithm):
        raise UnsupportedAlgorithmError(
            f"Invalid alg type {algorithm}. Not in [{', '.join(list_algorithms())}]"
        )
    return ALGORITHMS[algorithm]  # type: ignore[index]


__all__ = [
    "ALGORITHMS",
    "DSA",
    "ECDSA",
    "RSA",
    "RSA_PSS",
    "SignatureScheme",
    "get_scheme",
    "is_supported",
    "list_algorithms",
]
