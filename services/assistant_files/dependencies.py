from functools import lru_cache

from openai import AsyncOpenAI

from services.assistant_files.config import Config
from services.assistant_files.file_service import AssistantFileService
from services.assistant_files.provisioner import VectorStoreProvisioner


@lru_cache
def get_openai_client() -> AsyncOpenAI:
    return AsyncOpenAI(api_key=Config.OPENAI_API_KEY)


@lru_cache
def get_file_service() -> AssistantFileService:
    """One service per process so every request shares the provisioning lock."""
    settings = Config.to_settings()
    client = get_openai_client()
    return AssistantFileService(client, VectorStoreProvisioner(client, settings), settings)
