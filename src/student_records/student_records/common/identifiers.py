from __future__ import annotations

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_id() -> str:
    """Opaque id: epoch milliseconds plus a random base36 suffix.

    Collisions are not detected; two ids minted in the same millisecond differ only by the suffix.
    """

    millis = int(time.time() * 1000)
    suffix = "".join(random.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{millis}-{suffix}"
