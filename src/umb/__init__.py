"""umb: keep a project's Markdown memory bank up to date."""

__version__ = "0.3.0"
