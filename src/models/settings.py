import os

from dotenv import dotenv_values
from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator
from pydantic_core import PydanticCustomError


class Settings(BaseModel):
    """Settings model for environment variables with validation and defaults."""

    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")
    secret_key: str = Field(
        default="dev-secret-key-change-in-production",
        description="Secret key for session cookie signing",
    )
    database_name: str = Field(default="todos", description="Database file name")
    data_dir: str = Field(
        default=".", description="Directory for storing the SQLite database"
    )

    # Delay between a mutation's write and the list invalidation
    mutation_latency: float = Field(
        default=2.0, description="Artificial mutation latency in seconds"
    )
    session_idle_ttl: float = Field(
        default=3600.0, description="Idle seconds before a UI session is dropped"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate the log level is one logging understands."""
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise PydanticCustomError(
                "invalid_log_level", "Unknown log level: {level}", {"level": v}
            )
        return v.upper()

    @field_validator("mutation_latency", "session_idle_ttl")
    @classmethod
    def validate_mutation_latency(cls, v):
        if v < 0:
            raise PydanticCustomError(
                "negative_duration", "Durations can't be negative"
            )
        return v

    @classmethod
    def from_env_file(cls, env_path: str = ".env", validate: bool = True) -> "Settings":
        """Load settings from .env file if it exists.

        Args:
            env_path: Path to .env file
            validate: Whether to validate the settings
        """
        if not os.path.exists(env_path):
            if not validate:
                return cls.model_construct()
            raise FileNotFoundError(f".env file not found at {env_path}")

        env_values = dotenv_values(env_path)

        settings_dict = {}
        for field_name, field_info in cls.model_fields.items():
            env_value = env_values.get(field_name.upper())
            if env_value is None:
                continue
            if field_info.annotation is float:
                settings_dict[field_name] = float(env_value)
            elif field_info.annotation is bool:
                settings_dict[field_name] = env_value.lower() in (
                    "true",
                    "1",
                    "yes",
                    "on",
                )
            else:
                settings_dict[field_name] = env_value

        if not validate:
            return cls.model_construct(**settings_dict)

        return cls(**settings_dict)
