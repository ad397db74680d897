"""
XML implementation of the Codec port.

Litmos speaks a .NET flavoured XML dialect. After parsing with `xmltodict`
its artifacts look like this:

    <Email i:nil="true"/>           -> {"@i:nil": "true"}
    <Name lang="en">Bob</Name>      -> {"@lang": "en", "#text": "Bob"}
    <Users xmlns:i="..."/>          -> {"@xmlns:i": "..."}

The clean pass turns these into plain values so callers only ever see
strings, None, nested dicts and lists.
"""

import json
from typing import Any, List, Sequence

import xmltodict
from xml.parsers.expat import ExpatError

from ..application.domain import Codec
from ..application.exceptions import CodecError


ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"
NIL_KEY = "@i:nil"

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

# Litmos closes a page-aligned result with an element holding nothing but
# the namespace declaration.
TRAILING_ARTIFACT = {"@xmlns:i": XSI_NAMESPACE}


class XmlCodec(Codec):
    """Converts between Litmos XML and plain Python structures."""

    def encode(self, value: Any) -> str:
        """
        Serializes a mapping into compact XML.

        Strings are tried as JSON first; anything that is not a JSON object is
        assumed to be markup already and returned unchanged. Empty elements
        are written as `<Tag></Tag>` since Litmos rejects `<Tag/>`.

        Raises:
            CodecError: If the value cannot be represented as XML.
        """

        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except ValueError:
                return value
            if not isinstance(parsed, dict):
                return value
            value = parsed

        if not isinstance(value, dict):
            raise CodecError(
                f"Cannot encode {type(value).__name__} as XML, expected a mapping"
            )

        try:
            return xmltodict.unparse(
                _collapse_envelopes(value),
                full_document=False,
                short_empty_elements=False,
            )
        except (ValueError, TypeError) as e:
            raise CodecError(f"Failed to encode body as XML: {e}") from e

    def decode(
        self,
        body: Any,
        path: Sequence[str] = (),
        clean: bool = True,
        as_list: bool = False,
    ) -> Any:
        """
        Parses a Litmos response and resolves `path` within it.

        Args:
            body: XML text, or an already decoded structure to clean.
            path: Keys to descend through. Descent stops quietly at the first
                  missing key.
            clean: When False the raw subtree is returned untouched.
            as_list: The last key of `path` is a repeated item element. It is
                     parsed as a list even when only one item is present.

        Returns:
            The raw subtree, or a list of cleaned records when `clean` is set.

        Raises:
            CodecError: If `body` is not well-formed XML.
        """

        if isinstance(body, (str, bytes)):
            force_list = _item_matcher(path) if as_list and path else None
            try:
                node = xmltodict.parse(body, force_list=force_list)
            except ExpatError as e:
                raise CodecError(f"Malformed XML in Litmos response: {e}") from e
        else:
            node = body

        for key in path:
            if not isinstance(node, dict) or key not in node:
                break
            node = node[key]

        if not clean:
            return node

        return self.clean(node)

    def clean(self, entries: Any) -> List[Any]:
        """Cleans raw entries into records, dropping empty ones."""
        if entries is None:
            entries = []
        elif not isinstance(entries, list):
            entries = [entries]

        records = (_clean_value(entry) for entry in entries)
        return [record for record in records if record not in (None, {})]

    def is_trailing_artifact(self, entry: Any) -> bool:
        return entry == TRAILING_ARTIFACT


def _clean_value(value: Any) -> Any:
    """Replaces vendor markers in one decoded value, recursively."""

    if isinstance(value, dict):
        if value.get(TEXT_KEY):
            return value[TEXT_KEY]
        if value.get(NIL_KEY) == "true":
            return None
        cleaned = {
            key: _clean_value(child)
            for key, child in value.items()
            if not key.startswith(ATTRIBUTE_PREFIX)
        }
        return cleaned or None

    if isinstance(value, list):
        return [_clean_value(item) for item in value]

    return value


def _item_matcher(path: Sequence[str]):
    """Builds an xmltodict `force_list` hook for the item element at `path`."""

    parents = list(path[:-1])
    item = path[-1]

    def force_list(ancestors, key, value):
        return key == item and [name for name, _ in ancestors] == parents

    return force_list


def _collapse_envelopes(node: Any) -> Any:
    """
    Rewrites multi-record envelopes into xmltodict's repeated-child form.

    `{"Users": [{"User": a}, {"User": b}]}` becomes
    `{"Users": {"User": [a, b]}}`, so one `<Users>` element holds every
    `<User>` instead of each record getting its own `<Users>` wrapper.
    """

    if isinstance(node, dict):
        return {key: _collapse_envelopes(child) for key, child in node.items()}

    if isinstance(node, list):
        tags = {
            next(iter(item)) if isinstance(item, dict) and len(item) == 1 else None
            for item in node
        }
        if node and len(tags) == 1 and None not in tags:
            tag = tags.pop()
            if not tag.startswith(ATTRIBUTE_PREFIX):
                return {tag: [_collapse_envelopes(item[tag]) for item in node]}
        return [_collapse_envelopes(item) for item in node]

    return node
