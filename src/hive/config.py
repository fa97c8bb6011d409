"""Configuration settings for the application."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pydantic settings class for the application."""

    # Define the settings with default values and types
    # These will be loaded from environment variables or a .env file if not provided
    LOG_LEVEL: str = "info"  # Options: debug, info, warning, error, critical

    # Agent loop
    MAX_ITERATIONS: int = 5
    WORKER_MAX_ITERATIONS: int | None = None  # None: inherit MAX_ITERATIONS
    REQUEST_TIMEOUT: float = 300.0  # seconds, per backend request

    # Coordinator
    QUEEN_URL: str = "http://localhost:11435/api/chat"
    QUEEN_MODEL: str = "qwen2.5:32b-instruct-q5_K_M"

    # Workers
    FILE_MANAGER_URL: str = "http://localhost:11434/api/chat"
    FILE_MANAGER_MODEL: str = "qwen2.5:7b"
    SHELL_URL: str = "http://localhost:11434/api/chat"
    SHELL_MODEL: str = "qwen2.5:7b"
    SHELL_TIMEOUT: float = 60.0
    CODER_URL: str = "http://localhost:11435/api/chat"
    CODER_MODEL: str = "qwen2.5-coder:32b"

    # Root directory for the file manager and shell workers
    WORKSPACE_DIR: str = "."

    @property
    def worker_max_iterations(self) -> int:
        """Iteration ceiling for workers, falling back to the coordinator's."""
        if self.WORKER_MAX_ITERATIONS is None:
            return self.MAX_ITERATIONS
        return self.WORKER_MAX_ITERATIONS

    class Config:
        """Configuration for Pydantic settings."""

        # Load environment variables from a .env file
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
