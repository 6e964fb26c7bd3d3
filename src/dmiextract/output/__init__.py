"""Console and file logging."""
