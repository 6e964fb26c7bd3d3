"""Extract frames and animations from BYOND .dmi sprite containers."""

__version__ = "0.1.0"
