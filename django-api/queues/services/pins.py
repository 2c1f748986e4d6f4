"""PIN hashers.

A hasher turns a plaintext event PIN into the credential stored on the event
and checks candidate PINs against it. Plaintext PINs are never stored.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod

from django.contrib.auth.hashers import check_password, make_password


class PinHasher(ABC):
    """Interface for one-way PIN digests."""

    @abstractmethod
    def digest(self, plaintext: str) -> str:
        ...

    @abstractmethod
    def verify(self, plaintext: str, stored_digest: str) -> bool:
        ...


class Sha256PinHasher(PinHasher):
    """Unsalted single-round SHA-256, hex encoded.

    Deterministic and compatible with digests written by earlier deployments.
    """

    def digest(self, plaintext: str) -> str:
        return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()

    def verify(self, plaintext: str, stored_digest: str) -> bool:
        return hmac.compare_digest(self.digest(plaintext), stored_digest)


class DjangoPinHasher(PinHasher):
    """Salted, iterated digest using Django's configured password hashers."""

    def digest(self, plaintext: str) -> str:
        return make_password(plaintext)

    def verify(self, plaintext: str, stored_digest: str) -> bool:
        return check_password(plaintext, stored_digest)


PIN_HASHERS: dict[str, type[PinHasher]] = {
    "sha256": Sha256PinHasher,
    "django": DjangoPinHasher,
}


def get_pin_hasher(name: str) -> PinHasher:
    try:
        return PIN_HASHERS[name]()
    except KeyError:
        raise ValueError(f"Unknown PIN hasher: {name!r}") from None
