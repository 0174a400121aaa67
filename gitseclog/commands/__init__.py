"""Command implementations behind the gitseclog CLI."""
