"""Parsing of the tag annotations on a claim."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .constants import (
    ANNOTATION_STORAGE_PROVISIONER,
    ANNOTATION_TAGS,
    ANNOTATION_TAGS_SEPARATOR,
    DEFAULT_TAG_SEPARATOR,
    EBS_PROVISIONER,
    TAG_KEY_VALUE_SEPARATOR,
)


def is_ebs_claim(annotations: Mapping[str, str]) -> bool:
    """Return True if the claim was provisioned by the in-tree EBS provisioner."""
    return annotations.get(ANNOTATION_STORAGE_PROVISIONER) == EBS_PROVISIONER


@dataclass
class ParsedTags:
    """Result of parsing a tag list: valid pairs in order, plus rejected tokens."""

    pairs: list[tuple[str, str]] = field(default_factory=list)
    malformed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TagSpec:
    """A separator and the raw ``key=value`` list it joins."""

    raw: str
    separator: str = DEFAULT_TAG_SEPARATOR

    @classmethod
    def from_annotations(cls, annotations: Mapping[str, str]) -> TagSpec | None:
        """Read the tag spec from claim annotations.

        Returns:
            TagSpec, or None when the tag list annotation is absent or empty
        """
        raw = annotations.get(ANNOTATION_TAGS, "")
        if not raw:
            return None
        separator = annotations.get(ANNOTATION_TAGS_SEPARATOR) or DEFAULT_TAG_SEPARATOR
        return cls(raw=raw, separator=separator)

    def parse(self) -> ParsedTags:
        """Split the raw list into (key, value) pairs.

        A token must contain exactly one ``=``; anything else, including an
        empty token, is reported in ``malformed`` and left out. Every
        well-formed token yields an entry, repeats included. Keys and values
        are taken verbatim, whitespace included.
        """
        parsed = ParsedTags()
        for token in self.raw.split(self.separator):
            parts = token.split(TAG_KEY_VALUE_SEPARATOR)
            if len(parts) != 2:
                parsed.malformed.append(token)
                continue
            parsed.pairs.append((parts[0], parts[1]))
        return parsed
