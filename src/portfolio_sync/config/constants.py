"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "portfolio-sync"
APP_AUTHOR = "portafolio"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_TOKEN = "PORTFOLIO_SYNC_TOKEN"
ENV_TOKEN_FILE = "PORTFOLIO_SYNC_TOKEN_FILE"
ENV_OWNER = "PORTFOLIO_SYNC_OWNER"
ENV_REPO = "PORTFOLIO_SYNC_REPO"
ENV_BRANCH = "PORTFOLIO_SYNC_BRANCH"
ENV_DATA_DIR = "PORTFOLIO_SYNC_DATA_DIR"

# Remote defaults
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OWNER = "jessm23"
DEFAULT_REPO = "portafolio"
DEFAULT_BRANCH = "main"
DEFAULT_TIMEOUT = 30.0
DEFAULT_TOKEN_FILE = "token.txt"
GITHUB_MEDIA_TYPE = "application/vnd.github+json"

# Server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_REMOTE_PREFIX = "portafolioweb"
RECORDS_FILE = "proyectos.json"
UPLOADS_DIR = "uploads"
