"""
Run configuration for the script runner.
"""

import sys
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sqlrunner.core.config import settings


class RunConfig(BaseModel):
    """Immutable options for one ``ScriptRunner.run_script`` call.

    ``log_writer`` / ``error_writer`` are text streams (anything with ``write``);
    ``None`` silences that sink.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    stop_on_error: bool = False
    throw_warning: bool = False
    autocommit: bool = False
    send_full_script: bool = False
    remove_crs: bool = False
    escape_processing: bool = True
    delimiter: str = Field(default=";", min_length=1)
    full_line_delimiter: bool = False
    log_writer: Any = Field(default_factory=lambda: sys.stdout)
    error_writer: Any = Field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_settings(cls, **overrides: Any) -> "RunConfig":
        """Build a config from ``SCRIPT_*`` settings; keyword arguments take precedence."""
        values: dict[str, Any] = {
            "stop_on_error": settings.SCRIPT_STOP_ON_ERROR,
            "throw_warning": settings.SCRIPT_THROW_WARNING,
            "autocommit": settings.SCRIPT_AUTOCOMMIT,
            "send_full_script": settings.SCRIPT_SEND_FULL_SCRIPT,
            "remove_crs": settings.SCRIPT_REMOVE_CRS,
            "escape_processing": settings.SCRIPT_ESCAPE_PROCESSING,
            "delimiter": settings.SCRIPT_DELIMITER,
            "full_line_delimiter": settings.SCRIPT_FULL_LINE_DELIMITER,
        }
        values.update(overrides)
        return cls(**values)
