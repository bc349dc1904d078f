"""Stable string keys for reference entities.

A key is ``slug(name) + "|" + SOURCE``: the name lower-cased with
whitespace runs collapsed to hyphens, then the upper-cased source tag.
Decoding turns hyphens back into spaces, so names that contained hyphens
or capitals do not survive a round trip. Display names should come from
the entity record; ``display_name`` is a fallback.

Example:
    >>> KeyCodec.encode("Magic Missile", "xphb")
    'magic-missile|XPHB'
    >>> KeyCodec.decode("magic-missile|XPHB")
    EntityKey(name='magic missile', source='XPHB')
"""

from __future__ import annotations

import re
from typing import NamedTuple

from charsheet.core.exceptions import ValidationError


_WHITESPACE = re.compile(r"\s+")


class EntityKey(NamedTuple):
    """Decoded entity key."""

    name: str
    source: str


class KeyCodec:
    """Encode and decode ``name|SOURCE`` entity keys."""

    separator = "|"

    @staticmethod
    def slug(name: str) -> str:
        """Lower-case a name and collapse whitespace runs to hyphens."""
        return _WHITESPACE.sub("-", name.strip().lower())

    @classmethod
    def encode(cls, name: str, source: str) -> str:
        """Build the key of an entity.

        Args:
            name: Entity name.
            source: Source abbreviation.

        Returns:
            The entity key.
        """
        return f"{cls.slug(name)}{cls.separator}{source.strip().upper()}"

    @classmethod
    def decode(cls, key: str) -> EntityKey:
        """Split a key into its approximate name and source.

        Args:
            key: An entity key.

        Returns:
            The name (hyphens replaced by spaces) and source.

        Raises:
            ValidationError: If the key has no source separator.
        """
        name, sep, source = key.partition(cls.separator)
        if not sep:
            raise ValidationError(
                "Entity key has no source separator",
                field_name="key",
                invalid_value=key,
            )
        return EntityKey(name=name.replace("-", " "), source=source)

    @classmethod
    def display_name(cls, key: str) -> str:
        """Title-cased name decoded from a key ('fire-bolt|XPHB' -> 'Fire Bolt')."""
        return cls.decode(key).name.title()


build_key = KeyCodec.encode
parse_key = KeyCodec.decode


__all__ = [
    "EntityKey",
    "KeyCodec",
    "build_key",
    "parse_key",
]
