"""
Configuration for the fixture consumer.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


@dataclass
class ConsumeConfig:
    """Settings for re-checking generated instruction fixtures."""
    # Paths
    fixture_dir: str = "fixtures"

    # Execution settings
    stop_on_first_failure: bool = False
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "ConsumeConfig":
        """Load configuration from environment variables."""
        config = cls()
        config.fixture_dir = os.environ.get("FIXTURE_DIR", config.fixture_dir)
        config.verbose = _env_flag("VERBOSE")
        config.stop_on_first_failure = _env_flag("STOP_ON_FIRST_FAILURE")
        return config
