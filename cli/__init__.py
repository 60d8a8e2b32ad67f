"""Command-line entry point for termcrawl."""
