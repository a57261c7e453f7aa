# docsync/cli/commands/__init__.py
"""CLI command implementations (imported lazily by docsync.cli.cli)."""
