"""Local storage of project records."""
