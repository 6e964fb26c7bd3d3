"""Centralized constants for the application."""

# Exit codes
EXIT_OK = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_WRONG_EXTENSION = 2
EXIT_EXPORT_FAILED = 3

# Input containers
CONTAINER_EXTENSION = ".dmi"
DESCRIPTION_KEY = "Description"

# Icon defaults (BYOND)
DEFAULT_ICON_SIZE = 32
TICK_MILLIS = 100

# Output layout
STILL_FOLDER = "still"
ANIMATED_FOLDER = "animated"
STILL_EXTENSION = "png"
ANIMATED_EXTENSION = "gif"
