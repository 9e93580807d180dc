"""Unit tests for catalog models and the catalog loader."""
import asyncio

import pytest

from bistro.services.catalog.loader import CatalogLoader, CatalogState, items_from_documents
from bistro.services.catalog.models import Document, MenuItem
from bistro.services.catalog.store import DocumentStoreError
from tests.conftest import StaticDocumentStore


class TestMenuItem:
    """Test mapping documents to menu items."""

    def test_from_document(self):
        item = MenuItem.from_document(
            Document(id="a", data={"name": "Burger", "price": 5, "isAvailable": True, "category": "mains"})
        )

        assert item.id == "a"
        assert item.name == "Burger"
        assert item.price == 5
        assert item.is_available is True
        assert item.category == "mains"

    def test_document_id_wins_over_data_id(self):
        item = MenuItem.from_document(Document(id="doc-1", data={"id": "other", "name": "Soda"}))
        assert item.id == "doc-1"

    def test_absent_fields_stay_absent(self):
        """Defaults are a rendering concern; the item keeps None."""
        item = MenuItem.from_document(Document(id="b", data={"name": "Soda"}))

        assert item.price is None
        assert item.image is None
        assert item.is_available is None
        assert item.is_unavailable is False

    def test_only_explicit_false_is_unavailable(self):
        assert MenuItem(id="x", name="X", isAvailable=False).is_unavailable is True
        assert MenuItem(id="x", name="X", isAvailable=True).is_unavailable is False
        assert MenuItem(id="x", name="X").is_unavailable is False

    def test_falsy_non_boolean_availability_is_available(self):
        """0, "false" and "no" are not an explicit False."""
        for value in (0, "0", "false", "no", "off", ""):
            item = MenuItem.from_document(Document(id="z", data={"name": "Zero", "isAvailable": value}))
            assert item.is_available == value
            assert item.is_unavailable is False

    def test_odd_display_fields_do_not_skip_document(self):
        items = items_from_documents([
            Document(id="a", data={"name": "Burger", "isNew": "soon", "category": 7}),
            Document(id="b", data={"name": "Soda", "isAvailable": "n", "isPopular": [1]}),
        ])

        assert [item.id for item in items] == ["a", "b"]
        assert items[0].is_new == "soon"

    def test_extra_fields_pass_through(self):
        item = MenuItem.from_document(
            Document(id="a", data={"name": "Burger", "description": "Juicy", "spiceLevel": 2})
        )
        dumped = item.model_dump(by_alias=True)

        assert dumped["description"] == "Juicy"
        assert dumped["spiceLevel"] == 2

    def test_unreadable_documents_are_skipped(self):
        items = items_from_documents([
            Document(id="a", data={"name": "Burger"}),
            Document(id="b", data={"price": 3}),
            Document(id="c", data={"name": "Fries", "price": "not a number"}),
        ])

        assert [item.id for item in items] == ["a"]


class SlowStore(StaticDocumentStore):
    """Store whose reads wait on per-call events, to interleave loads."""

    def __init__(self, responses):
        super().__init__()
        self.responses = list(responses)
        self.gates = []

    async def list_documents(self, collection):
        response = self.responses.pop(0)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        if isinstance(response, Exception):
            raise response
        return response


class TestCatalogLoader:
    """Test catalog loading states and failure handling."""

    def test_initial_state(self, menu_store):
        loader = CatalogLoader(menu_store)

        assert loader.state == CatalogState.INIT
        assert loader.is_loading is True
        assert loader.items == []

    @pytest.mark.asyncio
    async def test_load_catalog(self, menu_store):
        loader = CatalogLoader(menu_store)

        items = await loader.load_catalog()

        assert loader.state == CatalogState.LOADED
        assert loader.is_loading is False
        assert [item.id for item in items] == ["a", "b", "c", "d", "e"]
        assert loader.error is None

    @pytest.mark.asyncio
    async def test_load_reads_configured_collection(self, menu_store):
        loader = CatalogLoader(menu_store, collection="specials")

        items = await loader.load_catalog()

        assert items == []
        assert loader.state == CatalogState.LOADED

    @pytest.mark.asyncio
    async def test_reload_replaces_catalog(self, menu_store):
        loader = CatalogLoader(menu_store)
        await loader.load_catalog()

        await menu_store.delete_document("menu", "a")
        await menu_store.set_document("menu", "z", {"name": "Zucchini"})
        await loader.load_catalog()

        assert [item.id for item in loader.items] == ["b", "c", "d", "e", "z"]
        assert menu_store.list_calls == 2

    @pytest.mark.asyncio
    async def test_first_load_failure_leaves_catalog_empty(self, failing_store):
        loader = CatalogLoader(failing_store)

        items = await loader.load_catalog()

        assert items == []
        assert loader.state == CatalogState.LOAD_ERROR
        assert loader.is_loading is False
        assert "connection refused" in loader.error

    @pytest.mark.asyncio
    async def test_failure_keeps_last_known_catalog(self, menu_store):
        loader = CatalogLoader(menu_store)
        await loader.load_catalog()

        menu_store.error = DocumentStoreError("timeout")
        await loader.load_catalog()

        assert loader.state == CatalogState.LOAD_ERROR
        assert len(loader.items) == 5

    @pytest.mark.asyncio
    async def test_success_after_failure_clears_error(self, menu_store):
        menu_store.error = DocumentStoreError("timeout")
        loader = CatalogLoader(menu_store)
        await loader.load_catalog()

        menu_store.error = None
        await loader.load_catalog()

        assert loader.state == CatalogState.LOADED
        assert loader.error is None

    @pytest.mark.asyncio
    async def test_state_is_loading_while_in_flight(self):
        store = SlowStore([[Document(id="a", data={"name": "Burger"})]])
        loader = CatalogLoader(store)

        task = asyncio.create_task(loader.load_catalog())
        await asyncio.sleep(0)
        assert loader.state == CatalogState.LOADING

        store.gates[0].set()
        await task
        assert loader.state == CatalogState.LOADED

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self):
        """Only the latest request's response is applied."""
        old = [Document(id="old", data={"name": "Old"})]
        new = [Document(id="new", data={"name": "New"})]
        store = SlowStore([old, new])
        loader = CatalogLoader(store)

        first = asyncio.create_task(loader.load_catalog())
        await asyncio.sleep(0)
        second = asyncio.create_task(loader.load_catalog())
        await asyncio.sleep(0)

        # newer request finishes first, older one lands afterwards
        store.gates[1].set()
        await second
        store.gates[0].set()
        await first

        assert [item.id for item in loader.items] == ["new"]
        assert loader.state == CatalogState.LOADED

    @pytest.mark.asyncio
    async def test_stale_failure_is_discarded(self):
        new = [Document(id="new", data={"name": "New"})]
        store = SlowStore([DocumentStoreError("late failure"), new])
        loader = CatalogLoader(store)

        first = asyncio.create_task(loader.load_catalog())
        await asyncio.sleep(0)
        second = asyncio.create_task(loader.load_catalog())
        await asyncio.sleep(0)

        store.gates[1].set()
        await second
        store.gates[0].set()
        await first

        assert loader.state == CatalogState.LOADED
        assert loader.error is None

    @pytest.mark.asyncio
    async def test_get_item(self, menu_store):
        loader = CatalogLoader(menu_store)
        await loader.load_catalog()

        assert loader.get_item("c").name == "Margherita Pizza"
        assert loader.get_item("missing") is None
