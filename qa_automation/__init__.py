"""qa-automation - recorded React interactions to test ids and Playwright tests."""

from .config import ProjectConfig, load_config
from .processor import ProcessingResult, SessionProcessor, process_session

__version__ = "0.1.0"

__all__ = [
    "ProjectConfig",
    "load_config",
    "SessionProcessor",
    "ProcessingResult",
    "process_session",
]
