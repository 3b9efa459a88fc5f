"""
Pydantic configuration for the coordination service.

Unknown keys are ignored so a larger application config can be passed through.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CoordinationConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enforce_same_organization: bool = Field(
        default=False,
        description=(
            "Reject assigning a volunteer to a shift of another organization. "
            "When off, such assignments are allowed and logged as warnings."
        ),
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Level for the package logger"
    )
