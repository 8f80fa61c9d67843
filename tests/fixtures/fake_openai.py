"""In-memory stand-in for the parts of AsyncOpenAI the service calls."""
import asyncio
import itertools
from collections import defaultdict
from types import SimpleNamespace

import httpx
import openai

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/test")


def rate_limit_error():
    return openai.RateLimitError(
        "Rate limit exceeded", response=httpx.Response(429, request=_REQUEST), body=None
    )


def not_found_error():
    return openai.NotFoundError(
        "No such file", response=httpx.Response(404, request=_REQUEST), body=None
    )


def server_error():
    return openai.InternalServerError(
        "upstream exploded", response=httpx.Response(500, request=_REQUEST), body=None
    )


class AsyncItems:
    """Async iterable like the SDK's paginators."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            await asyncio.sleep(0)
            yield item


class _Namespace:
    def __init__(self, fake, prefix):
        self._fake = fake
        self._prefix = prefix


class _Assistants(_Namespace):
    async def retrieve(self, assistant_id):
        await self._fake._enter(f"{self._prefix}.retrieve")
        return SimpleNamespace(
            id=assistant_id,
            tool_resources=SimpleNamespace(
                file_search=SimpleNamespace(vector_store_ids=list(self._fake.linked_store_ids))
            ),
        )

    async def update(self, assistant_id, tool_resources=None):
        await self._fake._enter(f"{self._prefix}.update")
        self._fake.linked_store_ids = list(tool_resources["file_search"]["vector_store_ids"])
        return await self.retrieve(assistant_id)


class _VectorStoreFiles(_Namespace):
    def list(self, vector_store_id):
        self._fake._record(f"{self._prefix}.list")
        return AsyncItems(
            SimpleNamespace(id=file_id, status=status)
            for file_id, status in self._fake.attached[vector_store_id].items()
        )

    async def retrieve(self, file_id, vector_store_id):
        await self._fake._enter(f"{self._prefix}.retrieve")
        attached = self._fake.attached[vector_store_id]
        if file_id not in attached:
            raise not_found_error()
        return SimpleNamespace(id=file_id, status=attached[file_id])

    async def create_and_poll(self, file_id, vector_store_id):
        await self._fake._enter(f"{self._prefix}.create_and_poll")
        status = self._fake.ingestion_status
        self._fake.attached[vector_store_id][file_id] = status
        return SimpleNamespace(id=file_id, status=status)

    async def delete(self, file_id, vector_store_id):
        await self._fake._enter(f"{self._prefix}.delete")
        attached = self._fake.attached[vector_store_id]
        if file_id not in attached:
            raise not_found_error()
        del attached[file_id]
        return SimpleNamespace(id=file_id, deleted=True)


class _VectorStores(_Namespace):
    def __init__(self, fake, prefix):
        super().__init__(fake, prefix)
        self.files = _VectorStoreFiles(fake, f"{prefix}.files")

    async def create(self, name):
        await self._fake._enter(f"{self._prefix}.create")
        vector_store_id = f"vs_{next(self._fake._ids)}"
        self._fake.stores[vector_store_id] = name
        return SimpleNamespace(id=vector_store_id, name=name)

    async def retrieve(self, vector_store_id):
        await self._fake._enter(f"{self._prefix}.retrieve")
        return SimpleNamespace(
            id=vector_store_id,
            name=self._fake.stores.get(vector_store_id),
            file_counts=SimpleNamespace(in_progress=self._fake.in_progress),
        )

    def search(self, vector_store_id, query, max_num_results=10):
        self._fake._record(f"{self._prefix}.search")
        scored = []
        for file_id in self._fake.attached[vector_store_id]:
            filename, content = self._fake.stored_files[file_id]
            score = content.decode().lower().count(query.lower())
            if score:
                scored.append(SimpleNamespace(file_id=file_id, filename=filename, score=float(score)))
        scored.sort(key=lambda hit: hit.score, reverse=True)
        return AsyncItems(scored[:max_num_results])


class _Files(_Namespace):
    async def create(self, file, purpose):
        await self._fake._enter(f"{self._prefix}.create")
        file_id = f"file_{next(self._fake._ids)}"
        self._fake.stored_files[file_id] = file
        return SimpleNamespace(id=file_id, filename=file[0], purpose=purpose)

    async def retrieve(self, file_id):
        await self._fake._enter(f"{self._prefix}.retrieve")
        if file_id not in self._fake.stored_files:
            raise not_found_error()
        return SimpleNamespace(id=file_id, filename=self._fake.stored_files[file_id][0])

    async def delete(self, file_id):
        await self._fake._enter(f"{self._prefix}.delete")
        self._fake.stored_files.pop(file_id, None)
        return SimpleNamespace(id=file_id, deleted=True)


class FakeAsyncOpenAI:
    """
    Keeps one assistant, its vector stores and uploaded files in memory.

    Queue exceptions with fail(call, *errors); each queued error is raised by
    the next matching call, e.g. fail("files.create", rate_limit_error()).
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.linked_store_ids = []
        self.stores = {}
        self.attached = defaultdict(dict)
        self.stored_files = {}
        self.in_progress = 0
        # status create_and_poll settles on
        self.ingestion_status = "completed"
        self.calls = []
        self._failures = defaultdict(list)

        self.beta = SimpleNamespace(assistants=_Assistants(self, "assistants"))
        self.vector_stores = _VectorStores(self, "vector_stores")
        self.files = _Files(self, "files")

    def fail(self, call, *errors):
        self._failures[call].extend(errors)

    def count(self, call):
        return self.calls.count(call)

    def _record(self, call):
        self.calls.append(call)
        if self._failures[call]:
            raise self._failures[call].pop(0)

    async def _enter(self, call):
        await asyncio.sleep(0)
        self._record(call)
