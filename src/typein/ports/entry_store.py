"""Entry store interface."""

from typing import Protocol


class EntryStore(Protocol):
    """Interface for the collection of journal entries."""

    @property
    def active_id(self) -> str | None:
        """Id of the entry currently open in the editor."""
        ...

    def get_active_document_text(self) -> str:
        """Content of the active entry ("" if there is none)."""
        ...

    def persist(self, entry_id: str, content: str) -> None:
        """Store new content for an entry."""
        ...
