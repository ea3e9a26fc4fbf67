"""Command encoding and process invocation for the external engines."""
