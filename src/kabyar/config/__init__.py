"""Configuration for the assignment worker."""

from .llm_config import LLMConfig
from .worker_config import WorkerConfig

__all__ = ["LLMConfig", "WorkerConfig"]
