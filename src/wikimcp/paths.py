"""Best-effort path normalization for Wiki.js lookups.

Wiki.js stores page paths without a leading slash, and some installations
expect a language segment (``ja/``, ``en/``) in front. Which form a given
server accepts cannot be known from outside, so lookups try the normalized
path first and then, if configured, a list of alternate variants in order.
This is a heuristic, not a guarantee.
"""

import re
from typing import Callable, Iterable, List, Tuple

PathTransform = Callable[[str], str]

LANGUAGE_CODE = re.compile(r"^[a-z]{2}(-[a-z]{2})?$", re.IGNORECASE)


def normalize_path(path: str) -> str:
    """Strip exactly one leading slash."""
    return path[1:] if path.startswith("/") else path


def with_leading_slash(path: str) -> str:
    return "/" + normalize_path(path)


def with_language_prefix(code: str) -> PathTransform:
    prefix = f"{code.strip('/')}/"

    def transform(path: str) -> str:
        normalized = normalize_path(path)
        if normalized.startswith(prefix):
            return normalized
        return prefix + normalized

    transform.__name__ = f"with_language_prefix_{code}"
    return transform


class PathPolicy:
    """Ordered fallback variants tried after the normalized path."""

    def __init__(self, fallbacks: Iterable[PathTransform] = ()):
        self.fallbacks: Tuple[PathTransform, ...] = tuple(fallbacks)

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "PathPolicy":
        """Build a policy from config tokens: ``slash`` or a language code.

        Raises:
            ValueError: a token is neither ``slash`` nor a language code.
        """
        fallbacks = []
        for token in tokens:
            if token.lower() == "slash":
                fallbacks.append(with_leading_slash)
            elif LANGUAGE_CODE.match(token):
                fallbacks.append(with_language_prefix(token.lower()))
            else:
                raise ValueError(f"Unknown path fallback '{token}'")
        return cls(fallbacks)

    def variants(self, path: str) -> List[str]:
        variants = [normalize_path(path)]
        for transform in self.fallbacks:
            candidate = transform(path)
            if candidate not in variants:
                variants.append(candidate)
        return variants
