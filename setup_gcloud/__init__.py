"""Install and configure the Google Cloud SDK inside a GitHub Actions job."""

__version__ = "3.0.1"
