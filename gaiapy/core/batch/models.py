"""
Batch operation tree.

A tree of groups and leaves describing many file operations the hub runs
as one unit. Keys the client does not interpret are kept in ``extra`` and
emitted unchanged.
"""
import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

from ..exceptions import GaiaConfigurationError

VALUES_KEY = 'values'
IS_SEQUENTIAL_KEY = 'isSequential'
ITEMS_PER_BATCH_KEYS = ('nItemsForNs', 'itemsPerBatch')


class OperationType(str, Enum):
    """Leaf operation types."""
    PUT_FILE = 'putFile'
    DELETE_FILE = 'deleteFile'


@dataclass
class BatchGroup:
    """
    Group of operations.

    Attributes:
        values: Child nodes, in order
        is_sequential: Execution hint for the hub
        extra: Other keys of the group (e.g. items per batch)
    """
    values: List['OperationNode']
    is_sequential: bool
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def items_per_batch(self) -> Any:
        for key in ITEMS_PER_BATCH_KEYS:
            if key in self.extra:
                return self.extra[key]
        return None

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.extra)
        result[VALUES_KEY] = [node.to_dict() for node in self.values]
        result[IS_SEQUENTIAL_KEY] = self.is_sequential
        return result


@dataclass
class BatchLeaf:
    """
    A single file operation.

    Attributes:
        id: Operation id
        type: Operation type
        path: Storage path or ``file://`` local reference
        content: Text content (putFile) or cipher object once transformed
        extra: Other keys of the leaf (e.g. ``doIgnoreDoesNotExistError``),
            including ``content`` for leaves other than putFile
    """
    id: str
    type: OperationType
    path: str
    content: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.extra)
        result['id'] = self.id
        result['type'] = self.type.value
        result['path'] = self.path
        if self.content is not None:
            result['content'] = copy.deepcopy(self.content)
        return result


@dataclass
class PassThroughNode:
    """A node the client does not rewrite; emitted exactly as received."""
    data: Any
    reason: str

    def to_dict(self) -> Any:
        return copy.deepcopy(self.data)


OperationNode = Union[BatchGroup, BatchLeaf, PassThroughNode]


def _parse_node(data: Any) -> OperationNode:
    if not isinstance(data, dict):
        return PassThroughNode(data, 'not an object')

    values = data.get(VALUES_KEY)
    is_sequential = data.get(IS_SEQUENTIAL_KEY)
    if isinstance(values, list) and isinstance(is_sequential, bool):
        extra = {k: v for k, v in data.items() if k not in (VALUES_KEY, IS_SEQUENTIAL_KEY)}
        return BatchGroup(
            values=[_parse_node(value) for value in values],
            is_sequential=is_sequential,
            extra=copy.deepcopy(extra)
        )

    node_id, node_type, path = data.get('id'), data.get('type'), data.get('path')
    if not all(isinstance(value, str) for value in (node_id, node_type, path)):
        return PassThroughNode(data, 'missing id, type or path')

    try:
        operation = OperationType(node_type)
    except ValueError:
        return PassThroughNode(data, f"unknown operation type {node_type!r}")

    # only putFile content is rewritten; other leaves keep theirs in extra
    is_put = operation is OperationType.PUT_FILE
    own_keys = ('id', 'type', 'path', 'content') if is_put else ('id', 'type', 'path')
    extra = {k: v for k, v in data.items() if k not in own_keys}
    return BatchLeaf(
        id=node_id,
        type=operation,
        path=path,
        content=copy.deepcopy(data.get('content')) if is_put else None,
        extra=copy.deepcopy(extra)
    )


def parse_operation_tree(data: Union[str, bytes, Dict[str, Any]]) -> OperationNode:
    """
    Parse an operation tree from JSON text or a decoded dict.

    The returned tree shares nothing with ``data``.

    Raises:
        GaiaConfigurationError: If the text is not JSON or the root is not
            an object
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GaiaConfigurationError(f"Operation tree is not JSON: {e}")

    if not isinstance(data, dict):
        raise GaiaConfigurationError("Operation tree root must be an object")

    return _parse_node(data)
