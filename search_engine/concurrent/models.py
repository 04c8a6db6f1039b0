"""
Data models for the work queue.
"""

from dataclasses import dataclass
from enum import Enum

from search_engine.utils.errors import ValidationError


DEFAULT_THREADS = 5


class WorkerState(Enum):
    """Worker thread state."""
    STARTING = "starting"
    IDLE = "idle"
    WORKING = "working"
    STOPPED = "stopped"


@dataclass
class WorkQueueConfig:
    """Configuration for a work queue."""
    threads: int = DEFAULT_THREADS
    name: str = "WorkQueue"
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()
    
    def validate(self) -> None:
        """
        Validate configuration parameters.
        
        Raises:
            ValidationError: If configuration is invalid
        """
        errors = []
        
        if not isinstance(self.threads, int) or self.threads < 1:
            errors.append("threads must be a positive integer")
        
        if not self.name:
            errors.append("name must not be empty")
        
        if errors:
            raise ValidationError(
                "Work queue configuration validation failed",
                {"errors": errors}
            )
    
    @classmethod
    def from_thread_count(cls, threads: int) -> "WorkQueueConfig":
        """Build a config, falling back to the default for non-positive counts."""
        return cls(threads=threads if threads >= 1 else DEFAULT_THREADS)
