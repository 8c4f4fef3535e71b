import os
from dotenv import load_dotenv

load_dotenv()

# Development-only signing key. ProdConfig refuses to start without a real one.
DEV_JWT_SECRET = 'dev-only-insecure-secret-change-me-now'


def _fix_db_url(url):
    """Fix common DATABASE_URL issues for SQLAlchemy compatibility."""
    if not url:
        return 'sqlite:///learnhub.db'
    # Heroku-style URLs use postgres:// but SQLAlchemy requires postgresql://
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SQLALCHEMY_DATABASE_URI = _fix_db_url(os.environ.get('DATABASE_URL', ''))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PORT = int(os.environ.get('PORT', '5000'))

    # Auth
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', '')
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_DAYS = int(os.environ.get('JWT_EXPIRES_DAYS', '30'))
    PASSWORD_HASH_METHOD = 'scrypt'

    # Search provider (Google Custom Search JSON API)
    GOOGLE_API_KEY = os.environ.get('GOOGLE_API_KEY', '')
    SEARCH_ENGINE_ID = os.environ.get('SEARCH_ENGINE_ID', '')
    SEARCH_TIMEOUT = float(os.environ.get('SEARCH_TIMEOUT', '10'))
    SEARCH_RETRIES = int(os.environ.get('SEARCH_RETRIES', '2'))
    SEARCH_BACKOFF = float(os.environ.get('SEARCH_BACKOFF', '0.5'))
    SEARCH_SITE_RESTRICT = os.environ.get('SEARCH_SITE_RESTRICT', '')

    EXPOSE_ERROR_DETAILS = _env_flag('EXPOSE_ERROR_DETAILS', False)
    AUTO_CREATE_SCHEMA = _env_flag('AUTO_CREATE_SCHEMA', False)

    # Settings that must be non-empty before the app will start
    REQUIRED_SETTINGS = ()


class DevConfig(Config):
    DEBUG = True
    JWT_SECRET_KEY = Config.JWT_SECRET_KEY or DEV_JWT_SECRET
    EXPOSE_ERROR_DETAILS = _env_flag('EXPOSE_ERROR_DETAILS', True)
    AUTO_CREATE_SCHEMA = _env_flag('AUTO_CREATE_SCHEMA', True)


class ProdConfig(Config):
    DEBUG = False
    REQUIRED_SETTINGS = ('JWT_SECRET_KEY', 'GOOGLE_API_KEY', 'SEARCH_ENGINE_ID')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key-not-for-production-use'
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    GOOGLE_API_KEY = 'test-key'
    SEARCH_ENGINE_ID = 'test-cx'
    SEARCH_RETRIES = 0
    SEARCH_BACKOFF = 0
    SEARCH_SITE_RESTRICT = ''
    EXPOSE_ERROR_DETAILS = False
    AUTO_CREATE_SCHEMA = False
