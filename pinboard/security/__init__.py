"""Secret loading helpers."""
