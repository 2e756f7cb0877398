"""Settings for the journal module."""
from pydantic import BaseModel, Field, field_validator


class JournalSettings(BaseModel):
    """Configuration settings for the signal journal.

    Attributes:
        data_file: JSON file holding the append-only journal.
        min_dwell_minutes: Minimum age before a signal may be resolved.
        history_limit: Default number of entries returned by get_history.
    """

    data_file: str = "data/journal.json"

    min_dwell_minutes: int = Field(default=15, ge=0, le=24 * 60)
    history_limit: int = Field(default=50, ge=1, le=1000)

    @field_validator("data_file")
    @classmethod
    def validate_data_file(cls, v: str) -> str:
        """Validate that data_file names a JSON file."""
        if not v.strip():
            raise ValueError("data_file must not be empty")
        if not v.endswith(".json"):
            raise ValueError(f"data_file must be a .json file, got {v}")
        return v
