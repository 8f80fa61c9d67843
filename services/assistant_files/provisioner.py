"""
Vector Store Provisioner - ties exactly one vector store to the assistant.
"""

import asyncio
import logging
from typing import Optional

from openai import AsyncOpenAI

from services.assistant_files.models import AssistantFilesSettings
from services.common.backoff import bind_backoff

logger = logging.getLogger(__name__)


def linked_vector_store_id(assistant) -> Optional[str]:
    """Return the first vector store id attached to the assistant, if any."""
    tool_resources = getattr(assistant, "tool_resources", None)
    file_search = getattr(tool_resources, "file_search", None) if tool_resources else None
    vector_store_ids = getattr(file_search, "vector_store_ids", None) if file_search else None
    if vector_store_ids:
        return vector_store_ids[0]
    return None


class VectorStoreProvisioner:
    """Get-or-create for the assistant's vector store."""

    def __init__(self, client: AsyncOpenAI, settings: AssistantFilesSettings):
        self.client = client
        self.settings = settings
        self._call = bind_backoff(settings.backoff_retries, settings.backoff_delay)
        self._lock = asyncio.Lock()

    async def _linked_store_id(self) -> Optional[str]:
        assistant_id = self.settings.assistant_id
        assistant = await self._call(
            lambda: self.client.beta.assistants.retrieve(assistant_id),
            "retrieve assistant",
        )
        logger.debug(f"Assistant retrieved: {assistant.id}")
        return linked_vector_store_id(assistant)

    async def get_or_create_vector_store_id(self) -> str:
        """
        Return the assistant's vector store id, creating and linking one if needed.

        The assistant is re-read under the lock before creating, so concurrent
        first-time callers in this process share a single new store.
        """
        vector_store_id = await self._linked_store_id()
        if vector_store_id:
            logger.debug(f"Existing vector store found: {vector_store_id}")
            return vector_store_id

        async with self._lock:
            vector_store_id = await self._linked_store_id()
            if vector_store_id:
                logger.debug(f"Vector store linked by a concurrent request: {vector_store_id}")
                return vector_store_id

            logger.info(f"Creating vector store for assistant {self.settings.assistant_id}")
            vector_store = await self._call(
                lambda: self.client.vector_stores.create(name=self.settings.vector_store_name),
                "create vector store",
            )
            logger.info(f"New vector store created: {vector_store.id}")

            await self._call(
                lambda: self.client.beta.assistants.update(
                    self.settings.assistant_id,
                    tool_resources={"file_search": {"vector_store_ids": [vector_store.id]}},
                ),
                "link vector store",
            )
            logger.info(f"Vector store {vector_store.id} associated with assistant")
            return vector_store.id
