"""Configuration management for the meal grid service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8080'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MEALGRID_DATA_DIR', str(BASE_DIR / 'data'))).resolve()

# Auth
JWT_SECRET: Final[str] = os.getenv('JWT_SECRET', 'my-meal-planner-secret-key-change-me-in-production')
JWT_ALGORITHM: Final[str] = 'HS256'
JWT_TTL_HOURS: Final[int] = int(os.getenv('JWT_TTL_HOURS', str(24 * 7)))

# Google OAuth
GOOGLE_CLIENT_ID: Final[str] = os.getenv('GOOGLE_CLIENT_ID', '')
GOOGLE_CLIENT_SECRET: Final[str] = os.getenv('GOOGLE_CLIENT_SECRET', '')
OAUTH_REDIRECT_URL: Final[str] = os.getenv('OAUTH_REDIRECT_URL') or 'http://localhost:8080/auth/google/callback'
FRONTEND_URL: Final[str] = os.getenv('FRONTEND_URL') or 'http://localhost:5173'

# CORS
CORS_ORIGINS: Final[list[str]] = [
    o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',') if o.strip()
]

# Remote store client
API_URL: Final[str] = os.getenv('API_URL', f'http://localhost:{APP_PORT}')
HTTP_TIMEOUT: Final[float] = float(os.getenv('HTTP_TIMEOUT', '10'))
