import asyncio

import pytest
from conftest import header, ids, item

from mailthread.exceptions import DataError
from mailthread.list_store import ListStore
from mailthread.mail_store import MailStore


class TestListStore:
    def test_filter_keeps_snapshot(self, thread_batch):
        store = ListStore()
        store.load_records(thread_batch)
        store.filter_by(lambda r: r.depth == 0)

        assert ids(store) == ["H1", "H2"]
        assert ids(store.snapshot) == ["H1", "I1", "I2", "H2"]
        assert store.get_store_length() == 4

        store.clear_filter()
        assert len(store) == 4

    def test_index_and_range_use_live_view(self, thread_batch):
        store = ListStore()
        store.load_records(thread_batch)
        store.filter_by(lambda r: r.id != "I1")

        assert store.index_of(thread_batch[2]) == 1
        assert store.index_of(thread_batch[1]) == -1
        assert ids(store.get_range(1, 2)) == ["I2", "H2"]
        assert store.get_at(10) is None

    def test_listeners(self, thread_batch):
        store = ListStore()
        seen = []

        def on_load(s, records):
            seen.append(len(records))

        store.on("load", on_load)
        store.load_records(thread_batch)
        store.un("load", on_load)
        store.load_records(thread_batch)

        assert seen == [4]


class TestAsyncLoad:
    @pytest.mark.asyncio
    async def test_load_without_loader(self):
        with pytest.raises(DataError):
            await ListStore().load()

    @pytest.mark.asyncio
    async def test_last_load_wins(self):
        release_first = asyncio.Event()
        batches = {
            1: [header("OLD", 0)],
            2: [header("H1", 1), item("I1")],
        }

        async def loader(folder_id, params):
            if params["page"] == 1:
                await release_first.wait()
            return batches[params["page"]]

        store = MailStore(folder_id="inbox", loader=loader)
        first = asyncio.create_task(store.load({"page": 1}))
        await asyncio.sleep(0)
        second = await store.load({"page": 2})
        release_first.set()
        dropped = await first

        assert dropped is None
        assert ids(second) == ["H1", "I1"]
        assert ids(store.snapshot) == ["H1", "I1"]

    @pytest.mark.asyncio
    async def test_loader_failure_leaves_state(self, thread_batch):
        async def loader(folder_id, params):
            raise ConnectionError("server gone")

        store = MailStore(folder_id="inbox", loader=loader)
        store.load_records(thread_batch)
        store.expand_conversation(thread_batch[0])

        with pytest.raises(ConnectionError):
            await store.load()

        assert ids(store) == ["H1", "I1", "I2", "H2"]
        assert store.open_set.get("H1") == ["I1", "I2"]

    @pytest.mark.asyncio
    async def test_load_passes_folder(self, thread_batch):
        seen = []

        async def loader(folder_id, params):
            seen.append(folder_id)
            return thread_batch

        store = MailStore(folder_id="inbox", loader=loader)
        await store.load()

        assert seen == ["inbox"]
        assert ids(store) == ["H1", "H2"]
