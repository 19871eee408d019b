"""portfolio-sync: project records, uploads and GitHub mirroring."""

__version__ = "0.1.0"
