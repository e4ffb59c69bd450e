from __future__ import annotations

from typing import Any, Protocol


class RemoteStore(Protocol):
    """Document-oriented remote system of record."""

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        ...

    async def create_document(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        ...

    async def merge_document(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        """Write only the supplied fields, leaving the rest of the document intact."""
        ...
