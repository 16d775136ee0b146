"""
Base protocol/interface for item storage implementations.
The search orchestrator and the summary generator depend only on this protocol.
"""

from typing import Protocol, runtime_checkable

from item_mcp.models import ItemInfo, ItemInput


@runtime_checkable
class ItemRepository(Protocol):
    """
    Protocol defining the interface for durable item storage.
    """

    async def save(self, item: ItemInfo) -> None:
        """
        Persist an item keyed by its id, overwriting any existing copy.

        Raises:
            StorageError: On I/O failure
        """
        ...

    async def get(self, item_id: str) -> ItemInfo | None:
        """
        Get an item by id.

        Returns:
            The item, or None when no item has this id

        Raises:
            StorageError: On I/O failure other than "not found"
        """
        ...

    async def update(self, item_id: str, new_data: ItemInput) -> ItemInfo | None:
        """
        Replace an item's content while keeping its id and creation time.

        Args:
            item_id: Id of the existing item
            new_data: New content; its own id/timestamps are ignored

        Returns:
            The updated item, or None (without writing) when the id is unknown
        """
        ...

    async def list_all(self) -> list[ItemInfo]:
        """
        Get every readable item. Unreadable entries are skipped.
        """
        ...

    async def list_by_category(self, category: str) -> list[ItemInfo]:
        """
        Get items whose category contains ``category`` (case-insensitive).
        An empty category returns every item.
        """
        ...

    async def find_duplicate(self, candidate: ItemInput) -> str | None:
        """
        Find the id of an existing item that likely describes the same thing.

        Returns:
            Id of the first matching item, or None
        """
        ...
