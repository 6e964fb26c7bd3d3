"""
Configuration system for dmiextract.

Two layers live here: AppSettings holds environment-overridable defaults
(pydantic-settings), and ExportConfig is the immutable per-run option set built
from the CLI and handed explicitly to the planner and the export driver.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import CONTAINER_EXTENSION, DEFAULT_ICON_SIZE, TICK_MILLIS

# =============================================================================
# INPUT SETTINGS
# =============================================================================

class InputSettings(BaseModel):
    """Input container validation settings."""

    container_extension: Annotated[str, Field(
        description="Required filename suffix for input containers"
    )] = CONTAINER_EXTENSION

    @field_validator('container_extension')
    @classmethod
    def validate_extension_format(cls, v):
        """Ensure extension starts with dot."""
        if not v.startswith('.'):
            raise ValueError(f"Extension must start with dot, got: {v}")
        return v


# =============================================================================
# ICON SETTINGS
# =============================================================================

class IconSettings(BaseModel):
    """Fallbacks used when a container header omits them."""

    default_width: Annotated[int, Field(
        gt=0,
        description="Icon width when the header has no width entry"
    )] = DEFAULT_ICON_SIZE

    default_height: Annotated[int, Field(
        gt=0,
        description="Icon height when the header has no height entry"
    )] = DEFAULT_ICON_SIZE

    tick_millis: Annotated[int, Field(
        gt=0,
        description="Milliseconds per delay tick"
    )] = TICK_MILLIS


# =============================================================================
# OUTPUT SETTINGS
# =============================================================================

class OutputSettings(BaseModel):
    """Output defaults."""

    default_root: Annotated[Path, Field(
        description="Output root used when --output is not given"
    )] = Path("out")

    animation_loop: Annotated[int, Field(
        ge=0,
        description="GIF loop count; 0 loops forever"
    )] = 0


# =============================================================================
# EXPORT CONFIGURATION
# =============================================================================

class ExportConfig(BaseModel):
    """Immutable set of options recognized by one export run."""

    model_config = ConfigDict(frozen=True)

    output_root: Path
    export_still: bool = False
    export_animated: bool = False
    per_container_subfolder: bool = True
    per_format_subfolder: bool = True

    @property
    def exports_anything(self) -> bool:
        return self.export_still or self.export_animated


# =============================================================================
# MAIN APPLICATION SETTINGS
# =============================================================================

class AppSettings(BaseSettings):
    """
    Application defaults with environment variable support.

    All settings can be overridden via environment variables with DMIEXTRACT_ prefix.
    Example: DMIEXTRACT_ICON__TICK_MILLIS=50
    """

    model_config = SettingsConfigDict(
        env_prefix="DMIEXTRACT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    input: InputSettings = InputSettings()
    icon: IconSettings = IconSettings()
    output: OutputSettings = OutputSettings()


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

app_settings = AppSettings()

ANIMATION_LOOP = app_settings.output.animation_loop


def create_settings_from_env() -> AppSettings:
    """Create a new settings instance from environment variables."""
    return AppSettings()
