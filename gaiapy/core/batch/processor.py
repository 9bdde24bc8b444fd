"""
Batch tree processor.

Encrypts every ``putFile`` leaf of an operation tree to the owner's public
key, then submits the whole tree to the hub in one request.
"""
from typing import Any, Dict, Union

from ..crypto import CryptoFacade
from ..exceptions import GaiaConfigurationError
from ..logging import get_logger
from ..storage import StorageSession, LocalFileReference
from .models import (
    OperationNode,
    OperationType,
    BatchGroup,
    BatchLeaf,
    PassThroughNode,
    parse_operation_tree,
)

logger = get_logger('gaiapy.batch')

TreeInput = Union[str, bytes, Dict[str, Any], BatchGroup, BatchLeaf, PassThroughNode]


class BatchTreeProcessor:
    """
    Rewrites and submits batch operation trees.

    Example:
        >>> processor = BatchTreeProcessor(storage)
        >>> result = await processor.perform_batch({
        ...     "values": [{"id": "1", "type": "putFile", "path": "a.json", "content": "{}"}],
        ...     "isSequential": False,
        ... })
    """

    def __init__(self, storage: StorageSession):
        self._storage = storage

    @property
    def crypto(self) -> CryptoFacade:
        return self._storage.crypto

    def transform(self, tree: TreeInput, recipient_public_key: str, base_dir: str = ''):
        """
        Encrypt the ``putFile`` leaves of a tree.

        Groups keep their order and metadata; other nodes are copied
        unchanged. The input is never modified.

        Args:
            tree: Tree as JSON text, dict or parsed node
            recipient_public_key: Key the leaf contents are encrypted to
            base_dir: Directory ``file://`` leaf paths are relative to

        Returns:
            The rewritten tree, as a dict when a dict or JSON text was given,
            else as a node

        Raises:
            GaiaConfigurationError: A ``putFile`` leaf has no usable content,
                or encryption failed
        """
        if isinstance(tree, (BatchGroup, BatchLeaf, PassThroughNode)):
            return self._transform_node(tree, recipient_public_key, base_dir)

        node = parse_operation_tree(tree)
        return self._transform_node(node, recipient_public_key, base_dir).to_dict()

    def _transform_node(
        self,
        node: OperationNode,
        recipient_public_key: str,
        base_dir: str
    ) -> OperationNode:
        if isinstance(node, BatchGroup):
            return BatchGroup(
                values=[
                    self._transform_node(child, recipient_public_key, base_dir)
                    for child in node.values
                ],
                is_sequential=node.is_sequential,
                extra=dict(node.extra)
            )

        if isinstance(node, BatchLeaf):
            if node.type is OperationType.PUT_FILE:
                return self._encrypt_leaf(node, recipient_public_key, base_dir)
            return BatchLeaf(node.id, node.type, node.path, node.content, dict(node.extra))

        logger.warning(f"Passing batch node through unchanged ({node.reason}): {node.data!r}")
        return PassThroughNode(node.data, node.reason)

    def _encrypt_leaf(self, leaf: BatchLeaf, recipient_public_key: str, base_dir: str) -> BatchLeaf:
        path = leaf.path
        local = LocalFileReference.parse(path, base_dir)

        if local is not None:
            content = local.read_sync()
            if content is None:
                logger.warning(f"Local file {local.local_path} missing, uploading empty content")
                content = b''
            path = local.storage_path
        elif isinstance(leaf.content, str):
            content = leaf.content
        else:
            raise GaiaConfigurationError(f"putFile operation {leaf.id} has no content")

        try:
            cipher_object = self.crypto.encrypt(content, recipient_public_key)
        except ValueError as e:
            raise GaiaConfigurationError(f"Could not encrypt operation {leaf.id}: {e}")

        return BatchLeaf(leaf.id, leaf.type, path, cipher_object, dict(leaf.extra))

    async def perform_batch(self, tree: TreeInput, base_dir: str = '') -> str:
        """
        Transform a tree to the owner's key and submit it.

        Returns:
            Response text from the hub

        Raises:
            GaiaNotAuthenticatedError: If the identity has no private key
            GaiaConfigurationError: Malformed tree or incomplete session
            GaiaError: Mapped transport and HTTP failures
        """
        recipient_public_key = self._storage.own_public_key()
        transformed = self.transform(tree, recipient_public_key, base_dir)
        if not isinstance(transformed, dict):
            transformed = transformed.to_dict()

        logger.debug("Submitting batch operation tree")
        return await self._storage.post_batch(transformed)
