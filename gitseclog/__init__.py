"""gitseclog - security audit log for pushes to a git repository."""

__version__ = "0.1.0"
