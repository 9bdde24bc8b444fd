"""Batch module: operation trees submitted as one hub request."""
from .models import (
    OperationType,
    OperationNode,
    BatchGroup,
    BatchLeaf,
    PassThroughNode,
    parse_operation_tree,
)
from .processor import BatchTreeProcessor

__all__ = [
    'OperationType',
    'OperationNode',
    'BatchGroup',
    'BatchLeaf',
    'PassThroughNode',
    'parse_operation_tree',
    'BatchTreeProcessor',
]
