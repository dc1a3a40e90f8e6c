"""
Custom exceptions for Newick parsing and tree manipulation.
"""

from __future__ import annotations

from typing import Optional


class NewickError(Exception):
    """Base exception for all nwktree errors."""

    pass


class NewickFormatError(NewickError):
    """Raised when a record contains malformed quoting or a bad branch length."""

    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.token = token


class UnbalancedStructureError(NewickError):
    """Raised when ')' or ',' appears without an enclosing parenthesis."""

    pass


class TreeStructureError(NewickError):
    """Base exception for failed tree surgery."""

    pass


class NoChildrenError(TreeStructureError):
    """Raised when a child is removed from a leaf."""

    pass


class ChildNotFoundError(TreeStructureError):
    """Raised when the child id is not part of the sibling chain."""

    def __init__(self, message: str, child_id: Optional[int] = None):
        super().__init__(message)
        self.child_id = child_id


class NotAncestorError(TreeStructureError):
    """Raised when an upward walk reaches the root without meeting the target."""

    pass


class EndOfTrees(NewickError):
    """Signals that a stream holds no further tree. Not an application error."""

    pass
