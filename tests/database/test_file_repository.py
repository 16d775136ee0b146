"""
Unit tests for the file-based item repository.

Covers persistence layout, lenient reading, updates that keep identity,
category listing and duplicate detection.
"""

import json

import pytest

from item_mcp.core.exceptions import StorageError
from item_mcp.database import FileItemRepository, ItemRepository
from tests.helpers import make_item, make_item_input


class TestSaveAndGet:
    """Tests for save() and get()."""

    @pytest.mark.asyncio
    async def test_save_writes_one_camel_case_file_per_item(self, repository, db_dir):
        item = make_item("item_abc", requirement_details="Two references")

        await repository.save(item)

        file_path = db_dir / "item_abc.json"
        assert file_path.exists()
        data = json.loads(file_path.read_text(encoding="utf-8"))
        assert data["id"] == "item_abc"
        assert data["applicationProcess"] == "Apply online"
        assert data["requirementDetails"] == "Two references"
        assert "createdAt" in data
        assert "updatedAt" not in data

    @pytest.mark.asyncio
    async def test_get_round_trips_saved_item(self, repository):
        item = make_item("item_abc")
        await repository.save(item)

        loaded = await repository.get("item_abc")

        assert loaded == item

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, repository):
        assert await repository.get("item_missing") is None

    @pytest.mark.asyncio
    async def test_get_corrupt_file_raises_storage_error(self, repository, db_dir):
        (db_dir / "item_bad.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            await repository.get("item_bad")

    @pytest.mark.asyncio
    async def test_save_overwrites_existing_item(self, repository):
        await repository.save(make_item("item_abc", name="First"))
        await repository.save(make_item("item_abc", name="Second"))

        loaded = await repository.get("item_abc")
        assert loaded.name == "Second"
        assert len(await repository.list_all()) == 1

    @pytest.mark.asyncio
    async def test_ids_cannot_escape_store_directory(self, repository, db_dir, tmp_path):
        await repository.save(make_item("../../escape"))

        assert not (tmp_path / "escape.json").exists()
        assert len(list(db_dir.glob("*.json"))) == 1

    @pytest.mark.asyncio
    async def test_reads_files_with_missing_optionals_and_extra_keys(self, repository, db_dir):
        raw = {
            "id": "item_old",
            "name": "Old Grant",
            "organization": "Org",
            "description": "d",
            "eligibility": "e",
            "amount": "a",
            "deadline": "dl",
            "applicationProcess": "ap",
            "url": "https://example.org",
            "category": "Legacy",
            "createdAt": "2023-05-01T00:00:00Z",
            "unknownField": 42,
        }
        (db_dir / "item_old.json").write_text(json.dumps(raw), encoding="utf-8")

        loaded = await repository.get("item_old")

        assert loaded.name == "Old Grant"
        assert loaded.contact_info is None
        assert loaded.source is None
        assert loaded.updated_at is None

    def test_satisfies_repository_protocol(self, repository):
        assert isinstance(repository, ItemRepository)


class TestUpdate:
    """Tests for update()."""

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(self, repository):
        original = make_item("item_abc")
        await repository.save(original)

        updated = await repository.update(
            "item_abc",
            make_item("web_other", name="Grant A v2", source="Org X (Web Search) (updated)"),
        )

        assert updated.id == "item_abc"
        assert updated.created_at == original.created_at
        assert updated.updated_at is not None
        assert updated.name == "Grant A v2"
        assert updated.source == "Org X (Web Search) (updated)"
        assert await repository.get("item_abc") == updated
        assert await repository.get("web_other") is None

    @pytest.mark.asyncio
    async def test_update_missing_id_returns_none_without_writing(self, repository, db_dir):
        result = await repository.update("item_missing", make_item_input())

        assert result is None
        assert list(db_dir.glob("*.json")) == []


class TestListing:
    """Tests for list_all() and list_by_category()."""

    @pytest.mark.asyncio
    async def test_list_all_skips_corrupt_files(self, repository, db_dir, caplog):
        await repository.save(make_item("item_good"))
        (db_dir / "item_bad.json").write_text("{broken", encoding="utf-8")

        items = await repository.list_all()

        assert [item.id for item in items] == ["item_good"]
        assert "item_bad.json" in caplog.text

    @pytest.mark.asyncio
    async def test_undecodable_file_is_skipped(self, repository, db_dir):
        await repository.save(make_item("item_ok", category="IT"))
        (db_dir / "bad.json").write_bytes(b'{"name": "\xff\xfe"}')

        items = await repository.list_by_category("it")

        assert [item.id for item in items] == ["item_ok"]
        assert await repository.find_duplicate(make_item_input(name="Unrelated")) is None

    @pytest.mark.asyncio
    async def test_get_undecodable_file_raises_storage_error(self, repository, db_dir):
        (db_dir / "item_bad.json").write_bytes(b"\xff\xfe")

        with pytest.raises(StorageError):
            await repository.get("item_bad")

    @pytest.mark.asyncio
    async def test_list_all_on_missing_directory_is_empty(self, tmp_path):
        repository = FileItemRepository(tmp_path / "db")
        repository.db_dir.rmdir()

        assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_list_by_category_is_case_insensitive_substring(self, repository):
        await repository.save(make_item("item_1", category="IT Support"))
        await repository.save(make_item("item_2", category="Agriculture"))

        items = await repository.list_by_category("it")

        assert [item.id for item in items] == ["item_1"]

    @pytest.mark.asyncio
    async def test_list_by_empty_category_returns_everything(self, repository):
        await repository.save(make_item("item_1", category="IT"))
        await repository.save(make_item("item_2", category="Agriculture"))

        assert len(await repository.list_by_category("")) == 2


class TestFindDuplicate:
    """Tests for find_duplicate()."""

    @pytest.mark.asyncio
    async def test_exact_name_match_ignores_case(self, repository):
        await repository.save(make_item("item_1", name="Grant A"))

        assert await repository.find_duplicate(make_item_input(name="grant a")) == "item_1"

    @pytest.mark.asyncio
    async def test_partial_name_with_organization_match(self, repository):
        await repository.save(
            make_item("item_1", name="Grant A for Startups", organization="Org X Foundation"),
        )

        candidate = make_item_input(name="Grant A", organization="org x", url="")

        assert await repository.find_duplicate(candidate) == "item_1"

    @pytest.mark.asyncio
    async def test_partial_name_with_identical_url(self, repository):
        await repository.save(
            make_item(
                "item_1",
                name="Grant A for Startups",
                organization="Someone",
                url="https://example.org/a",
            ),
        )

        candidate = make_item_input(
            name="Grant A",
            organization="Unrelated",
            url="https://example.org/a",
        )

        assert await repository.find_duplicate(candidate) == "item_1"

    @pytest.mark.asyncio
    async def test_partial_name_alone_is_not_a_duplicate(self, repository):
        await repository.save(
            make_item("item_1", name="Grant A for Startups", organization="Org X", url="u1"),
        )

        candidate = make_item_input(name="Grant A", organization="Other", url="u2")

        assert await repository.find_duplicate(candidate) is None

    @pytest.mark.asyncio
    async def test_empty_name_never_matches(self, repository):
        await repository.save(make_item("item_1", name="Grant A"))

        assert await repository.find_duplicate(make_item_input(name="")) is None

    @pytest.mark.asyncio
    async def test_exact_match_wins_over_earlier_partial_match(self, repository):
        await repository.save(make_item("item_a", name="Grant A Plus", organization="Org X"))
        await repository.save(make_item("item_b", name="Grant A", organization="Other"))

        candidate = make_item_input(name="Grant A", organization="Org X")

        assert await repository.find_duplicate(candidate) == "item_b"

    @pytest.mark.asyncio
    async def test_first_match_in_file_name_order_wins(self, repository):
        await repository.save(make_item("item_b", name="Grant A"))
        await repository.save(make_item("item_a", name="Grant A"))

        assert await repository.find_duplicate(make_item_input(name="Grant A")) == "item_a"
