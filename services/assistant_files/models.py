from pydantic import BaseModel
from typing import Optional


class AssistantFilesSettings(BaseModel):
    assistant_id: str
    vector_store_name: str = "sample-assistant-vector-store"
    backoff_retries: int = 7
    backoff_delay: float = 1.5
    search_max_results: int = 2
    purge_deleted_files: bool = False


class DeleteFileRequest(BaseModel):
    fileId: Optional[str] = None


# Response Models
class FileInfo(BaseModel):
    file_id: str
    filename: Optional[str] = None
    status: str


class SearchHit(FileInfo):
    score: Optional[float] = None
