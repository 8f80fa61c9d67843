class AssistantFilesError(Exception):
    """Base class for errors raised by the assistant files service."""


class VectorStoreNotReadyError(AssistantFilesError):
    """The vector store still has files being ingested."""

    def __init__(self, vector_store_id: str, in_progress: int):
        self.vector_store_id = vector_store_id
        self.in_progress = in_progress
        super().__init__(
            f"Vector store {vector_store_id} is still processing {in_progress} file(s)"
        )


class FileNotInVectorStoreError(AssistantFilesError):
    """The requested file is not attached to the vector store."""

    def __init__(self, file_id: str, vector_store_id: str):
        self.file_id = file_id
        self.vector_store_id = vector_store_id
        super().__init__(f"File {file_id} not found in vector store {vector_store_id}")


class FileIngestionFailedError(AssistantFilesError):
    """The vector store finished ingesting a file without completing it."""

    def __init__(self, file_id: str, status: str):
        self.file_id = file_id
        self.status = status
        super().__init__(f"Ingestion of file {file_id} ended with status {status}")
