# config.py
# Basic configuration settings for the Flask application

import os

# Determine the base directory of the application (where config.py lives)
basedir = os.path.abspath(os.path.dirname(__file__))

# Define the instance path relative to the base directory
instance_path = os.path.join(basedir, 'instance')

class Config:
    """Base configuration class."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'

    # Database configuration (Development/Production)
    # Points to 'instance/app.db' relative to config.py location
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(instance_path, 'app.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False # Disable modification tracking

    SITE_NAME = "Machinery Export Catalog"
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Locales served under /<lang>/...
    SUPPORTED_LANGUAGES = ('en', 'ja')
    DEFAULT_LANGUAGE = 'en'

    # USD -> JPY rate used for the derived yen price string
    JPY_EXCHANGE_RATE = int(os.environ.get('JPY_EXCHANGE_RATE', 110))

    # Seconds the public category counts stay cached
    CATEGORY_COUNTS_CACHE_TTL = int(os.environ.get('CATEGORY_COUNTS_CACHE_TTL', 60))

    # Sell/buy form submissions accepted per client address per minute (0 = unlimited)
    INQUIRY_RATE_LIMIT = int(os.environ.get('INQUIRY_RATE_LIMIT', 10))


class TestingConfig(Config):
    """Configuration specific to testing."""
    TESTING = True

    # In-memory database, rebuilt for every app instance
    SQLALCHEMY_DATABASE_URI = 'sqlite://'

    # Disable CSRF protection during tests for simplicity
    WTF_CSRF_ENABLED = False

    # Ensure Flask-Login works normally during tests (not disabled)
    LOGIN_DISABLED = False

    # Use a fixed, predictable secret key for testing sessions
    SECRET_KEY = 'testing-secret-key'

    CATEGORY_COUNTS_CACHE_TTL = 0
