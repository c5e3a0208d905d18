"""
Tests for batch promotion.
"""
import pytest

from poi_gateway.errors import UpstreamError
from poi_gateway.services.sync_service import NO_PENDING_OBJECT, SyncService
from poi_gateway.storage.folder_index import FolderIndex
from poi_gateway.storage.models import Folder
from poi_gateway.storage.move import MoveEngine


def make_service(gateway, batch_limit: int = 50) -> SyncService:
    return SyncService(
        index=FolderIndex(gateway),
        mover=MoveEngine(gateway),
        batch_limit=batch_limit
    )


def partition(result):
    return (
        [m.identifier for m in result.moved],
        [s.identifier for s in result.skipped],
        [e.identifier for e in result.errors],
    )


class TestSync:
    """Tests for per-identifier outcomes."""

    @pytest.mark.asyncio
    async def test_moves_matches_and_skips_the_rest(self, gateway):
        gateway.add_object("ADDR1.jpg", Folder.PENDING)
        service = make_service(gateway)

        result = await service.sync(["ADDR1", "ADDR2"])

        assert len(result.moved) == 1
        assert result.moved[0].identifier == "ADDR1"
        assert result.moved[0].from_path == "pending/ADDR1.jpg"
        assert result.moved[0].to_path == "approved/ADDR1.jpg"
        assert [(s.identifier, s.reason) for s in result.skipped] == [("ADDR2", NO_PENDING_OBJECT)]
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_lists_pending_once_per_batch(self, gateway):
        gateway.add_object("A.jpg", Folder.PENDING)
        gateway.add_object("B.jpg", Folder.PENDING)
        service = make_service(gateway)

        await service.sync(["A", "B", "C"])

        assert gateway.count("list") == 1

    @pytest.mark.asyncio
    async def test_second_run_skips_promoted_identifier(self, gateway):
        gateway.add_object("ADDR1.jpg", Folder.PENDING)
        service = make_service(gateway)

        first = await service.sync(["ADDR1"])
        second = await service.sync(["ADDR1"])

        assert partition(first) == (["ADDR1"], [], [])
        assert partition(second) == ([], ["ADDR1"], [])
        assert second.skipped[0].reason == NO_PENDING_OBJECT
        assert gateway.names_in(Folder.APPROVED) == ["ADDR1.jpg"]

    @pytest.mark.asyncio
    async def test_approved_only_identifier_is_skipped(self, gateway):
        gateway.add_object("ADDR1.jpg", Folder.APPROVED)
        service = make_service(gateway)

        result = await service.sync(["ADDR1"])

        assert partition(result) == ([], ["ADDR1"], [])

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_backend_calls(self, gateway):
        service = make_service(gateway)

        result = await service.sync([])

        assert result.total == 0
        assert gateway.count() == 0


class TestBatchLimits:
    """Tests for truncation and repeats."""

    @pytest.mark.asyncio
    async def test_truncates_to_fifty(self, gateway):
        identifiers = [f"ADDR{i}" for i in range(60)]
        for identifier in identifiers[::2]:
            gateway.add_object(f"{identifier}.jpg", Folder.PENDING)
        service = make_service(gateway)

        result = await service.sync(identifiers)

        moved, skipped, errors = partition(result)
        processed = moved + skipped + errors
        assert result.total == 50
        assert sorted(processed) == sorted(identifiers[:50])
        assert "ADDR55" not in processed
        assert gateway.find("ADDR56.jpg", Folder.PENDING) is not None

    @pytest.mark.asyncio
    async def test_custom_limit(self, gateway):
        service = make_service(gateway, batch_limit=2)

        result = await service.sync(["A", "B", "C"])

        assert partition(result) == ([], ["A", "B"], [])

    @pytest.mark.asyncio
    async def test_repeated_identifier_processed_once(self, gateway):
        gateway.add_object("ADDR1.jpg", Folder.PENDING)
        service = make_service(gateway)

        result = await service.sync(["ADDR1", "ADDR1", "ADDR2"])

        assert partition(result) == (["ADDR1"], ["ADDR2"], [])
        assert gateway.count("delete") == 1


class TestFailureIsolation:
    """A failing identifier never affects its siblings."""

    @pytest.mark.asyncio
    async def test_one_failure_does_not_abort_batch(self, gateway):
        gateway.add_object("A.jpg", Folder.PENDING)
        broken = gateway.add_object("B.jpg", Folder.PENDING)
        gateway.add_object("C.jpg", Folder.PENDING)
        broken.content_link = "https://cdn.test/missing"
        service = make_service(gateway)

        result = await service.sync(["A", "B", "C", "D"])

        assert partition(result) == (["A", "C"], ["D"], ["B"])
        assert "fetch" in result.errors[0].error
        assert gateway.find("B.jpg", Folder.PENDING) is not None

    @pytest.mark.asyncio
    async def test_partition_is_exhaustive_and_exclusive(self, gateway):
        for name in ["A.jpg", "B.jpg"]:
            gateway.add_object(name, Folder.PENDING)
        gateway.fail_on["delete"] = UpstreamError("Storage delete failed with status 500")
        service = make_service(gateway)
        submitted = ["A", "B", "X", "Y"]

        result = await service.sync(submitted)

        moved, skipped, errors = partition(result)
        assert sorted(moved + skipped + errors) == sorted(submitted)
        assert len(set(moved) | set(skipped) | set(errors)) == len(submitted)
        assert errors == ["A", "B"]
        assert "could not delete" in result.errors[0].error

    @pytest.mark.asyncio
    async def test_second_mover_delete_failure_is_an_error_entry(self, gateway):
        gateway.add_object("ADDR1.jpg", Folder.PENDING)
        stale = await FolderIndex(gateway).index_folder(Folder.PENDING)

        class StaleIndex:
            async def index_folder(self, folder):
                return stale

        # First caller promotes the object
        await make_service(gateway).sync(["ADDR1"])

        # Second caller listed before the first one deleted
        racer = SyncService(index=StaleIndex(), mover=MoveEngine(gateway))
        result = await racer.sync(["ADDR1"])

        assert partition(result) == ([], [], ["ADDR1"])
        assert "could not delete pending/ADDR1.jpg" in result.errors[0].error
        assert gateway.names_in(Folder.APPROVED) == ["ADDR1.jpg"]

    @pytest.mark.asyncio
    async def test_listing_failure_fails_the_call(self, gateway):
        gateway.fail_on["list"] = UpstreamError("Storage list failed with status 503")
        service = make_service(gateway)

        with pytest.raises(UpstreamError):
            await service.sync(["ADDR1"])
