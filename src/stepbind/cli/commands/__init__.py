"""stepbind CLI commands."""
