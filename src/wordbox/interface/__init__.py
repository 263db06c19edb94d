"""Command-line interface for wordbox."""
