"""Navigation error taxonomy.

The navigation engine raises these to say why a move has no destination. The
:class:`~markup_navigator.api.navigator.MarkupNavigator` facade catches every
:class:`NavigationError` and turns it into a no-op, so they never reach the
host.
"""

from typing import Optional


class NavigationError(Exception):
    """Base exception for navigation requests that cannot move the cursor."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        document_id: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.document_id = document_id


class NoActiveDocument(NavigationError):
    """No host document is currently active."""


class NoNodeAtOffset(NavigationError):
    """The cursor offset does not fall inside any node."""


class NoEligibleTarget(NavigationError):
    """The parent/child/sibling/attribute search found no candidate."""
