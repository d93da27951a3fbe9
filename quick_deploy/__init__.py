"""Quick Deploy: provision Fastly Compute@Edge services from GitHub templates."""

__version__ = "0.1.0"
