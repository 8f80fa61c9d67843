from .errors import AssistantFilesError, FileNotInVectorStoreError, VectorStoreNotReadyError
from .file_service import AssistantFileService
from .provisioner import VectorStoreProvisioner

__all__ = [
    "AssistantFilesError",
    "AssistantFileService",
    "FileNotInVectorStoreError",
    "VectorStoreNotReadyError",
    "VectorStoreProvisioner",
]
