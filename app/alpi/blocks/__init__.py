"""Managed text blocks and bash profile edits."""

from alpi.blocks.managed import ManagedBlock, apply_block, ensure_line, remove_block, remove_line

__all__ = ["ManagedBlock", "apply_block", "ensure_line", "remove_block", "remove_line"]
