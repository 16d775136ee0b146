"""File-based item repository.

Each item is stored as ``<db_dir>/<id>.json`` and read or written whole.
There is no index file: listings scan the directory. Blocking file I/O runs
in the default executor so searches keep the event loop responsive.

Concurrent writes to the same id are not serialized; the last writer wins.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError as PydanticValidationError

from item_mcp.core.constants import ITEM_FILE_SUFFIX
from item_mcp.core.exceptions import StorageError
from item_mcp.models import ItemInfo, ItemInput, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FileItemRepository:
    """Item repository with one JSON file per item."""

    def __init__(self, db_dir: str | Path) -> None:
        """Initialize the repository, creating the storage directory if needed.

        Args:
            db_dir: Directory holding the item files
        """
        self._db_dir = Path(db_dir)
        if not self._db_dir.exists():
            self._db_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created item storage directory: %s", self._db_dir)

    @property
    def db_dir(self) -> Path:
        return self._db_dir

    # ========== Helpers ==========

    def _get_file_path(self, item_id: str) -> Path:
        """Get file path for an item id (sanitized)."""
        # Sanitize id to prevent path traversal
        safe_id = item_id.replace("/", "_").replace("\\", "_").replace("..", "_")
        return self._db_dir / f"{safe_id}{ITEM_FILE_SUFFIX}"

    async def _run(self, func: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    def _write_file(self, item: ItemInfo) -> None:
        file_path = self._get_file_path(item.id)
        try:
            file_path.write_text(
                json.dumps(item.to_json_dict(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            msg = f"Failed to save item {item.id}: {e}"
            raise StorageError(msg) from e

    def _read_file(self, file_path: Path) -> ItemInfo:
        return ItemInfo.model_validate_json(file_path.read_text(encoding="utf-8"))

    def _read_item(self, item_id: str) -> ItemInfo | None:
        file_path = self._get_file_path(item_id)
        if not file_path.exists():
            return None
        try:
            return self._read_file(file_path)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            msg = f"Failed to read item {item_id}: {e}"
            raise StorageError(msg) from e

    def _read_all(self) -> list[ItemInfo]:
        if not self._db_dir.exists():
            return []

        try:
            files = sorted(self._db_dir.glob(f"*{ITEM_FILE_SUFFIX}"))
        except OSError as e:
            msg = f"Failed to list items in {self._db_dir}: {e}"
            raise StorageError(msg) from e

        items = []
        for file_path in files:
            try:
                items.append(self._read_file(file_path))
            except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
                logger.warning("Skipping unreadable item file %s: %s", file_path.name, e)
        return items

    # ========== Repository API ==========

    async def save(self, item: ItemInfo) -> None:
        """Write an item, overwriting any file with the same id."""
        await self._run(self._write_file, item)
        logger.info("Saved item: %s", item.id)

    async def get(self, item_id: str) -> ItemInfo | None:
        """Read an item by id; None when it does not exist."""
        return await self._run(self._read_item, item_id)

    async def update(self, item_id: str, new_data: ItemInput) -> ItemInfo | None:
        """Replace an item's content, keeping ``id`` and ``created_at``."""
        existing = await self.get(item_id)
        if existing is None:
            logger.warning("Item to update not found: %s", item_id)
            return None

        fields = new_data.model_dump(exclude={"id", "created_at", "updated_at"})
        updated = ItemInfo(
            **fields,
            id=item_id,
            created_at=existing.created_at,
            updated_at=utc_now(),
        )
        await self.save(updated)
        logger.info("Updated item: %s", item_id)
        return updated

    async def list_all(self) -> list[ItemInfo]:
        """Read every item file; corrupt files are logged and skipped."""
        return await self._run(self._read_all)

    async def list_by_category(self, category: str) -> list[ItemInfo]:
        """Items whose category contains ``category``, case-insensitively."""
        items = await self.list_all()
        if not category:
            return items
        return [item for item in items if item.matches_category(category)]

    async def find_duplicate(self, candidate: ItemInput) -> str | None:
        """Find an existing item matching ``candidate``.

        Tier 1: exact case-insensitive name equality.
        Tier 2: the candidate name is contained in the existing name, and
        either the candidate organization is contained in the existing
        organization or the urls are identical.

        Tier 1 is checked against every item before tier 2; within a tier the
        first item in enumeration order wins.
        """
        if not candidate.name:
            return None

        items = await self.list_all()
        name = candidate.name.lower()

        for existing in items:
            if existing.name.lower() == name:
                return existing.id

        organization = candidate.organization.lower()
        for existing in items:
            if name not in existing.name.lower():
                continue
            if organization and organization in existing.organization.lower():
                return existing.id
            if candidate.url and existing.url and candidate.url == existing.url:
                return existing.id

        return None
