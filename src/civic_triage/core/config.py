"""Configuration management for Civic Triage"""

import os
from typing import List
from dotenv import load_dotenv

# Load .env file if exists
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")


class Config:
    """Central configuration for the complaint triage service"""

    def __init__(self):
        # Logging configuration
        self.LOG_LEVEL = os.getenv("CIVIC_LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT = os.getenv("CIVIC_LOG_FORMAT", "json").lower()
        # Empty means console only; no file is opened
        self.LOG_FILE = os.getenv("CIVIC_LOG_FILE", "")

        # Classification configuration
        self.FALLBACK_DEPARTMENT = os.getenv("CIVIC_FALLBACK_DEPARTMENT", "Public Works")
        self.URGENCY_KEYWORD_LIMIT = int(os.getenv("CIVIC_URGENCY_KEYWORD_LIMIT", "10"))
        self.TAG_LIMIT = int(os.getenv("CIVIC_TAG_LIMIT", "12"))

        # Batch configuration
        self.BATCH_SIZE = int(os.getenv("CIVIC_BATCH_SIZE", "100"))
        self.MAX_WORKERS = int(os.getenv("CIVIC_MAX_WORKERS", "1"))

        # Insight recommendation thresholds
        self.CRITICAL_SHARE_THRESHOLD = float(os.getenv("CIVIC_CRITICAL_SHARE_THRESHOLD", "0.1"))
        self.NEGATIVE_SHARE_THRESHOLD = float(os.getenv("CIVIC_NEGATIVE_SHARE_THRESHOLD", "0.6"))
        self.MIN_AVG_CONFIDENCE = float(os.getenv("CIVIC_MIN_AVG_CONFIDENCE", "0.7"))

    def validate(self) -> List[str]:
        """
        Validate configuration

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.LOG_LEVEL not in LOG_LEVELS:
            errors.append(f"CIVIC_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.LOG_LEVEL}")

        if self.LOG_FORMAT not in LOG_FORMATS:
            errors.append(f"CIVIC_LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {self.LOG_FORMAT}")

        if not self.FALLBACK_DEPARTMENT:
            errors.append("CIVIC_FALLBACK_DEPARTMENT is not set")

        for name in ("URGENCY_KEYWORD_LIMIT", "TAG_LIMIT", "BATCH_SIZE", "MAX_WORKERS"):
            if getattr(self, name) < 1:
                errors.append(f"CIVIC_{name} must be positive")

        for name in ("CRITICAL_SHARE_THRESHOLD", "NEGATIVE_SHARE_THRESHOLD", "MIN_AVG_CONFIDENCE"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"CIVIC_{name} must be between 0 and 1, got {value}")

        return errors

    def __repr__(self):
        return f"<Civic Triage Config: fallback={self.FALLBACK_DEPARTMENT}, log={self.LOG_LEVEL}>"


# Global config instance
config = Config()

def get_config() -> Config:
    """Get global config instance"""
    return config
