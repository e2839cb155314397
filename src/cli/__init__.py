"""Command-line wiring: click commands, structured logging, terminal output."""
