"""flowcheck: end-to-end and static checks for GitHub Actions issue automation."""

__version__ = "0.1.0"
