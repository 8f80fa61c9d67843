import os
from dotenv import load_dotenv

from services.assistant_files.models import AssistantFilesSettings

load_dotenv()


class Config:
    # OpenAI credentials and the assistant whose files are managed
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_ASSISTANT_ID = os.getenv("OPENAI_ASSISTANT_ID", "")

    # Name given to the vector store when the assistant has none yet
    VECTOR_STORE_NAME = os.getenv("VECTOR_STORE_NAME", "sample-assistant-vector-store")

    # Rate limit retry policy
    BACKOFF_RETRIES = int(os.getenv("BACKOFF_RETRIES", "7"))
    BACKOFF_DELAY = float(os.getenv("BACKOFF_DELAY", "1.5"))  # seconds

    SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "2"))

    # Also remove the raw file from OpenAI storage when it is detached
    PURGE_DELETED_FILES = os.getenv("PURGE_DELETED_FILES", "false").lower() == "true"

    # Logging
    IS_PRODUCTION = os.getenv("IS_PRODUCTION", "no")
    LOG_URL = os.getenv("LOG_URL", "assistant_files.log")

    @classmethod
    def validate(cls):
        """Validate required configuration."""
        errors = []

        if not cls.OPENAI_API_KEY:
            errors.append("OPENAI_API_KEY is required")

        if not cls.OPENAI_ASSISTANT_ID:
            errors.append("OPENAI_ASSISTANT_ID is required")

        if cls.BACKOFF_RETRIES < 1:
            errors.append("BACKOFF_RETRIES must be at least 1")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))

    @classmethod
    def to_settings(cls) -> AssistantFilesSettings:
        return AssistantFilesSettings(
            assistant_id=cls.OPENAI_ASSISTANT_ID,
            vector_store_name=cls.VECTOR_STORE_NAME,
            backoff_retries=cls.BACKOFF_RETRIES,
            backoff_delay=cls.BACKOFF_DELAY,
            search_max_results=cls.SEARCH_MAX_RESULTS,
            purge_deleted_files=cls.PURGE_DELETED_FILES,
        )
