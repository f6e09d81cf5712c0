"""
Tag query facilities.

A tag is a comma-separated directive string attached to a field under a
key, e.g. ``json="name,omitempty"`` or ``validate="email,min=1"``. The
functions here take the raw tag string (``None`` when the field does not
carry the tag) and never look at the field itself.
"""

from collections.abc import Iterable, Iterator, Mapping


def primary_value(tag: str | None, fallback: str = "") -> str:
    """
    Get the first value of a tag.

    Params:
        tag: Raw tag string, or None when the tag is absent
        fallback: Value returned when the tag is absent or its first token is empty

    Returns:
        The first comma-delimited token, or fallback

    Examples:
        primary_value("name,omitempty", "Name") -> "name"
        primary_value(None, "Name") -> "Name"
        primary_value(",omitempty", "Name") -> "Name"
    """
    if not tag:
        return fallback
    first = tag.split(",", 1)[0]
    return first or fallback


def all_values(tag: str | None) -> list[str]:
    """
    Get every value of a tag, in declaration order.

    Params:
        tag: Raw tag string, or None when the tag is absent

    Returns:
        List of comma-delimited tokens; empty when the tag is absent
    """
    if tag is None:
        return []
    return tag.split(",")


def keyed_values(tag: str | None) -> dict[str, str]:
    """
    Get the ``key=value`` entries of a tag.

    Each token is split once on ``=``; a bare token maps to an empty string.

    Examples:
        keyed_values("pk=name,noupdate") -> {"pk": "name", "noupdate": ""}
    """
    values = {}
    for token in all_values(tag):
        key, _, value = token.partition("=")
        values[key] = value
    return values


def contains_any(tag: str | None, candidates: Iterable[str]) -> bool:
    """
    Check whether a tag holds at least one of the candidate values.

    Only whole tokens match: looking for ``email`` does not match a token
    ``email_extra``.

    Params:
        tag: Raw tag string, or None when the tag is absent
        candidates: Values to look for

    Returns:
        True if any candidate equals one of the tag's tokens
    """
    tokens = set(all_values(tag))
    return any(candidate in tokens for candidate in candidates)


def strip_keys(tag: str | None, keys: Iterable[str]) -> str | None:
    """
    Rewrite a tag without the tokens whose key is listed.

    The key of a token is the part before ``=`` (the whole token when it has
    no ``=``). Used to keep list-level constraints such as ``min=1`` off the
    elements synthesized from a list of primitives.

    Examples:
        strip_keys("email,min=1,max=3", ["min", "max"]) -> "email"
    """
    if tag is None:
        return None
    removed = set(keys)
    kept = [token for token in tag.split(",") if token.partition("=")[0] not in removed]
    return ",".join(kept)


class Tags(Mapping[str, str]):
    """Immutable mapping of tag key to raw tag string for one field."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Mapping[str, str] | None = None):
        self._tags = dict(tags or {})

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._tags.items())))

    def __repr__(self) -> str:
        body = " ".join(f'{key}:"{value}"' for key, value in self._tags.items())
        return f"Tags({body})"

    def lookup(self, key: str) -> str | None:
        """Get the raw tag string for key, or None when the field lacks the tag."""
        return self._tags.get(key)

    def get(self, key: str, default: str = "") -> str:
        """Get the raw tag string for key, or an empty string when absent."""
        return self._tags.get(key, default)

    def without(self, key: str, removed: Iterable[str]) -> "Tags":
        """
        Copy these tags with the tag under key stripped of the removed keys.

        Params:
            key: Tag to rewrite (e.g. "validate")
            removed: Keys of the tokens to drop from that tag

        Returns:
            New Tags instance; other tags are carried over unchanged
        """
        if key not in self._tags:
            return self
        rewritten = dict(self._tags)
        rewritten[key] = strip_keys(self._tags[key], removed)
        return Tags(rewritten)

    def as_lists(self) -> dict[str, list[str]]:
        """Get every tag split into its values, e.g. {"json": ["name", "omitempty"]}."""
        return {key: all_values(value) for key, value in self._tags.items()}
