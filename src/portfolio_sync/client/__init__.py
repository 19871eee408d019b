"""HTTP client for the remote contents API."""
