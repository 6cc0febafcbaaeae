from __future__ import annotations

import os


class Settings:
    # Storage formats used by the date casts
    DATE_FORMAT: str = os.getenv("MODEL_ATTRIBUTES_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")
    DATE_ONLY_FORMAT: str = os.getenv("MODEL_ATTRIBUTES_DATE_ONLY_FORMAT", "%Y-%m-%d")

    # Run saving_validation() from the flush hooks
    VALIDATE_ON_SAVE: bool = os.getenv("MODEL_ATTRIBUTES_VALIDATE_ON_SAVE", "true").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("MODEL_ATTRIBUTES_LOG_LEVEL", "WARNING").upper()


settings = Settings()
