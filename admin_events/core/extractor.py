"""Attribute extraction from admin event representations."""
from __future__ import annotations
import json
from typing import Any, Optional

from .exceptions import AttributeMissingError, AttributeParseError


class AttributeExtractor:
    """Read top-level string attributes from an event's JSON representation.

    The representation is re-parsed on every call; nothing is cached.

    Known defect kept for compatibility with existing consumers: every literal
    backslash is stripped before parsing, so legitimately escaped content
    (e.g. ``"a\\\\b"`` or ``"\\"quoted\\""``) is altered or rejected.
    """

    @staticmethod
    def _sanitize(representation: str) -> str:
        return representation.replace("\\", "")

    def extract(self, representation: Optional[str], attribute_name: str) -> str:
        """Return the string value of ``attribute_name``.

        Args:
            representation: JSON text, a single object or an array whose first
                element is the object of interest
            attribute_name: Top-level field to read

        Returns:
            Attribute value

        Raises:
            AttributeParseError: Representation is empty or not valid JSON
            AttributeMissingError: Field is absent or not a string
        """
        if not representation:
            raise AttributeParseError(attribute_name)

        try:
            node: Any = json.loads(self._sanitize(representation))
        except json.JSONDecodeError as exc:
            raise AttributeParseError(attribute_name, exc) from exc

        if isinstance(node, list):
            if not node:
                raise AttributeMissingError(attribute_name)
            node = node[0]

        if not isinstance(node, dict):
            raise AttributeMissingError(attribute_name)

        value = node.get(attribute_name)
        if not isinstance(value, str):
            raise AttributeMissingError(attribute_name)
        return value

    def extract_id(self, representation: Optional[str]) -> str:
        return self.extract(representation, "id")

    def extract_name(self, representation: Optional[str]) -> str:
        return self.extract(representation, "name")
