"""Order-independent cache keys for ingredient sets."""
import base64
from collections.abc import Iterable

SEPARATOR = "|"


def fingerprint(names: Iterable[str]) -> str:
    """
    Encode a set of ingredient names as a stable, storage-safe key.

    Names are de-duplicated, sorted by code point (case-sensitive) and joined
    with ``SEPARATOR``; the result is base64-encoded. Base64 is only used to
    get an opaque key, not for secrecy. The empty set encodes to ``""``.

    Raises:
        ValueError: if a name contains the separator
    """
    unique = sorted(set(names))
    for name in unique:
        if SEPARATOR in name:
            raise ValueError(f"Ingredient name may not contain {SEPARATOR!r}: {name!r}")
    return base64.b64encode(SEPARATOR.join(unique).encode()).decode()
