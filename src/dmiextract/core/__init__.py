"""Data model, output planning and shared constants."""
