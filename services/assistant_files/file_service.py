import asyncio
import logging
from typing import List, Optional

import openai
from openai import AsyncOpenAI

from services.assistant_files.errors import (
    FileIngestionFailedError,
    FileNotInVectorStoreError,
    VectorStoreNotReadyError,
)
from services.assistant_files.models import AssistantFilesSettings, FileInfo, SearchHit
from services.assistant_files.provisioner import VectorStoreProvisioner
from services.common.backoff import bind_backoff

logger = logging.getLogger(__name__)


class AssistantFileService:
    def __init__(
        self,
        client: AsyncOpenAI,
        provisioner: VectorStoreProvisioner,
        settings: AssistantFilesSettings,
    ):
        self.client = client
        self.provisioner = provisioner
        self.settings = settings
        self._call = bind_backoff(settings.backoff_retries, settings.backoff_delay)

    async def upload_file(self, filename: str, content: bytes) -> FileInfo:
        """
        Upload a file and attach it to the assistant's vector store.

        Blocks until the vector store has finished ingesting the file. If the
        attach step fails, or ingestion ends in any status but completed, the
        file is detached and the uploaded raw file is removed again.
        """
        vector_store_id = await self.provisioner.get_or_create_vector_store_id()
        logger.info(f"Uploading {filename} to vector store {vector_store_id}")

        uploaded = await self._call(
            lambda: self.client.files.create(file=(filename, content), purpose="assistants"),
            "upload file",
        )
        logger.debug(f"Raw file stored: {uploaded.id}")

        try:
            vector_store_file = await self._call(
                lambda: self.client.vector_stores.files.create_and_poll(
                    file_id=uploaded.id, vector_store_id=vector_store_id
                ),
                "attach file",
            )
        except Exception:
            await self._discard_raw_file(uploaded.id)
            raise

        if vector_store_file.status != "completed":
            logger.warning(
                f"File {uploaded.id} finished ingestion with status {vector_store_file.status}"
            )
            await self._detach_failed_file(vector_store_id, uploaded.id)
            await self._discard_raw_file(uploaded.id)
            raise FileIngestionFailedError(uploaded.id, vector_store_file.status)

        logger.info(f"File uploaded and processed in vector store: {uploaded.id}")
        return FileInfo(file_id=uploaded.id, filename=filename, status=vector_store_file.status)

    async def _detach_failed_file(self, vector_store_id: str, file_id: str):
        try:
            await self._call(
                lambda: self.client.vector_stores.files.delete(
                    file_id, vector_store_id=vector_store_id
                ),
                "detach failed file",
            )
        except openai.NotFoundError:
            logger.debug(f"File {file_id} was not attached to {vector_store_id}")
        except Exception as e:
            logger.error(f"Failed to detach file {file_id}: {e}")

    async def _discard_raw_file(self, file_id: str):
        try:
            await self._call(lambda: self.client.files.delete(file_id), "discard raw file")
            logger.info(f"Discarded raw file {file_id} after failed upload")
        except Exception as e:
            logger.error(f"Failed to discard raw file {file_id}: {e}")

    async def _attached_file_ids(self, vector_store_id: str) -> List[str]:
        async def collect():
            return [
                f.id
                async for f in self.client.vector_stores.files.list(vector_store_id=vector_store_id)
            ]

        return await self._call(collect, "list vector store files")

    async def _describe_file(self, vector_store_id: str, file_id: str) -> FileInfo:
        file_details, vector_store_file = await asyncio.gather(
            self._call(lambda: self.client.files.retrieve(file_id), "retrieve file"),
            self._call(
                lambda: self.client.vector_stores.files.retrieve(
                    file_id, vector_store_id=vector_store_id
                ),
                "retrieve vector store file",
            ),
        )
        return FileInfo(
            file_id=file_id,
            filename=file_details.filename,
            status=vector_store_file.status,
        )

    async def list_files(self) -> List[FileInfo]:
        """List every file attached to the vector store with its ingestion status."""
        vector_store_id = await self.provisioner.get_or_create_vector_store_id()
        file_ids = await self._attached_file_ids(vector_store_id)
        logger.debug(f"Vector store {vector_store_id} has {len(file_ids)} file(s)")

        files = await asyncio.gather(
            *(self._describe_listed_file(vector_store_id, file_id) for file_id in file_ids)
        )
        return [f for f in files if f is not None]

    async def _describe_listed_file(self, vector_store_id: str, file_id: str) -> Optional[FileInfo]:
        # A concurrent delete may remove the file after the listing was taken
        try:
            return await self._describe_file(vector_store_id, file_id)
        except openai.NotFoundError:
            logger.info(f"File {file_id} disappeared before it could be described, skipping")
            return None

    async def delete_file(self, file_id: str):
        """Detach a file from the vector store."""
        vector_store_id = await self.provisioner.get_or_create_vector_store_id()
        logger.info(f"Deleting file {file_id} from vector store {vector_store_id}")

        try:
            await self._call(
                lambda: self.client.vector_stores.files.delete(
                    file_id, vector_store_id=vector_store_id
                ),
                "detach file",
            )
        except openai.NotFoundError as e:
            raise FileNotInVectorStoreError(file_id, vector_store_id) from e

        if self.settings.purge_deleted_files:
            try:
                await self._call(lambda: self.client.files.delete(file_id), "delete raw file")
                logger.debug(f"Raw file {file_id} removed from storage")
            except openai.NotFoundError:
                logger.debug(f"Raw file {file_id} was already purged")

        logger.info(f"File deleted from vector store: {file_id}")

    async def ensure_ready(self):
        """Return the vector store, or raise if files are still being ingested."""
        vector_store_id = await self.provisioner.get_or_create_vector_store_id()
        vector_store = await self._call(
            lambda: self.client.vector_stores.retrieve(vector_store_id),
            "retrieve vector store",
        )
        in_progress = vector_store.file_counts.in_progress
        if in_progress > 0:
            logger.warning(f"Vector store {vector_store_id} is still processing {in_progress} file(s)")
            raise VectorStoreNotReadyError(vector_store_id, in_progress)
        return vector_store

    async def search_files(self, query: str) -> List[SearchHit]:
        """Return the files most relevant to query, best match first."""
        vector_store = await self.ensure_ready()
        max_results = self.settings.search_max_results

        async def collect():
            return [
                hit
                async for hit in self.client.vector_stores.search(
                    vector_store.id, query=query, max_num_results=max_results
                )
            ]

        hits = (await self._call(collect, "search vector store"))[:max_results]
        logger.info(f"Search returned {len(hits)} hit(s)")

        described = await asyncio.gather(
            *(self._describe_listed_file(vector_store.id, hit.file_id) for hit in hits)
        )
        return [
            SearchHit(**info.model_dump(), score=hit.score)
            for info, hit in zip(described, hits)
            if info is not None
        ]
