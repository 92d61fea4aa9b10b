"""Command-line interface for pmresolver."""
