"""Configuration dataclasses for LifeQuote."""

import os
from dataclasses import dataclass, field


@dataclass
class LifeQuoteConfig:
    """Application-level settings.

    Values that differ per deployment are read from the environment (a
    ``.env`` file is loaded by the CLI before this is constructed).
    """

    # Age bounds accepted by the age step
    min_age: int = 18
    max_age: int = 85

    # Defaults for the `quote` command
    default_coverage: int = 250_000
    default_term: int = 20

    # Phone number shown at the lock-in step (empty = "coming soon")
    agent_phone: str = field(default_factory=lambda: os.getenv("LIFEQUOTE_AGENT_PHONE", ""))

    log_level: str = field(
        default_factory=lambda: os.getenv("LIFEQUOTE_LOG_LEVEL", "WARNING").upper()
    )

    def validate(self) -> None:
        """Validate configuration."""
        if self.min_age < 18:
            raise ValueError("min_age must be at least 18")
        if self.max_age <= self.min_age:
            raise ValueError(f"max_age ({self.max_age}) must exceed min_age ({self.min_age})")
        if self.default_coverage <= 0:
            raise ValueError("default_coverage must be positive")
        if self.default_term <= 0:
            raise ValueError("default_term must be positive")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {self.log_level}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "min_age": self.min_age,
            "max_age": self.max_age,
            "default_coverage": self.default_coverage,
            "default_term": self.default_term,
            "agent_phone": self.agent_phone,
            "log_level": self.log_level,
        }
