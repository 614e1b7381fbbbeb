"""Command-line interface support for stepbind."""
