"""CLI commands for loopvet."""
