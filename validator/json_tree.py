"""
JSON Document Tree

Tagged view over parsed JSON values. Every value is classified into one
JsonKind, and ``walk`` yields a JsonNode for every value in a document in
depth-first order, carrying its path in dot/bracket notation
(``messages[0].value.amount``) and a link to its parent node.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Union


class JsonKind(Enum):
    """JSON value kinds."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> JsonKind:
    """
    Classify a parsed JSON value.

    Booleans are checked before numbers since ``bool`` subclasses ``int``.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def child_path(path: str, key: Union[str, int]) -> str:
    """Path of a child value under ``path``."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


@dataclass(frozen=True)
class JsonNode:
    """A value in a JSON document together with its location."""
    value: Any
    kind: JsonKind
    path: str = ""
    key: Optional[Union[str, int]] = None
    parent: Optional['JsonNode'] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def container_key(self) -> Optional[str]:
        """Object key of the array holding this node, if it is an array element."""
        if isinstance(self.key, int) and self.parent is not None:
            key = self.parent.key
            return key if isinstance(key, str) else None
        return None

    def get(self, key: str, default: Any = None) -> Any:
        """Member value of an object node."""
        if self.kind != JsonKind.OBJECT:
            return default
        return self.value.get(key, default)

    def child(self, key: Union[str, int]) -> 'JsonNode':
        """Node for a direct member or element."""
        value = self.value[key]
        return JsonNode(
            value=value,
            kind=kind_of(value),
            path=child_path(self.path, key),
            key=key,
            parent=self,
        )

    def children(self) -> Iterator['JsonNode']:
        """Direct members of an object or elements of an array."""
        if self.kind == JsonKind.OBJECT:
            for key in self.value:
                yield self.child(key)
        elif self.kind == JsonKind.ARRAY:
            for index in range(len(self.value)):
                yield self.child(index)

    def ancestors(self) -> Iterator['JsonNode']:
        """Parent, grandparent and so on up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


def root_node(document: Any) -> JsonNode:
    """Wrap a parsed document as the root node."""
    return JsonNode(value=document, kind=kind_of(document))


def walk(document: Any) -> Iterator[JsonNode]:
    """
    Depth-first traversal of a parsed JSON document.

    Null values are skipped; their containers are still visited.
    """
    stack = [root_node(document)]
    while stack:
        node = stack.pop()
        if node.kind == JsonKind.NULL:
            continue
        yield node
        # Reverse so siblings come out in document order
        stack.extend(reversed(list(node.children())))


def parse_json(text: str) -> Any:
    """Parse JSON text; raises ``json.JSONDecodeError`` on malformed input."""
    return json.loads(text)


def is_object(value: Any) -> bool:
    return kind_of_safe(value) == JsonKind.OBJECT


def is_array(value: Any) -> bool:
    return kind_of_safe(value) == JsonKind.ARRAY


def kind_of_safe(value: Any) -> Optional[JsonKind]:
    """Like kind_of, but returns None for non-JSON values."""
    try:
        return kind_of(value)
    except TypeError:
        return None
