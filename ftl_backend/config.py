# ftl_backend/config.py
import os
import logging
from datetime import timedelta
from dotenv import load_dotenv

# Base directory of this config file (ftl_backend/) and the project root (one level up)
CONFIG_FILE_DIR = os.path.abspath(os.path.dirname(__file__))
PROJECT_ROOT = os.path.dirname(CONFIG_FILE_DIR)

logger = logging.getLogger(__name__)

# Load .env file from the PROJECT_ROOT if it exists
dotenv_path = os.path.join(PROJECT_ROOT, '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)

DEFAULT_SECRET_KEY = 'change_this_default_secret_key_in_prod_ftl'
DEFAULT_JWT_SECRET_KEY = 'change_this_default_jwt_secret_key_in_prod_ftl'

# Sub-folders of UPLOAD_FOLDER, created at start-up
UPLOAD_SUBDIRS = ('resumes', 'blog-images', 'team-images', 'equipment-images', 'equipment-manuals')


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY', DEFAULT_SECRET_KEY)
    DEBUG = False
    TESTING = False
    ENV_NAME = 'default'
    API_VERSION = '1.0.0'
    SERVER_NAME_LABEL = 'FTL Backend Server'
    PORT = int(os.environ.get('PORT', 5000))

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(PROJECT_ROOT, 'instance', 'ftl.sqlite3')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', DEFAULT_JWT_SECRET_KEY)
    JWT_TOKEN_LOCATION = ['headers']
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=8)

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(PROJECT_ROOT, 'uploads'))
    IMAGE_FOLDER = os.environ.get('IMAGE_FOLDER', os.path.join(PROJECT_ROOT, 'image'))
    CLIENT_BUILD_FOLDER = os.environ.get('CLIENT_BUILD_FOLDER', os.path.join(PROJECT_ROOT, 'client', 'build'))
    SERVE_CLIENT_BUILD = False
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    ALLOWED_DOCUMENT_EXTENSIONS = {'pdf', 'doc', 'docx'}
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024 # 10MB

    # --- Email Configuration (admin notifications) ---
    MAIL_SERVER = os.environ.get('MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'true').lower() in ('true', '1', 't')
    MAIL_USE_SSL = os.environ.get('MAIL_USE_SSL', 'false').lower() in ('true', '1', 't')
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@ftl.org.in')
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.environ.get('LOG_FILE', None)

    CLIENT_URL = os.environ.get('CLIENT_URL', 'https://ftl.org.in')
    CORS_ORIGINS = ['http://localhost:3000', 'http://127.0.0.1:3000']
    CORS_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'OPTIONS']
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization', 'X-Requested-With']

    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', "memory://")
    RATELIMIT_STRATEGY = "fixed-window"
    RATELIMIT_HEADERS_ENABLED = True
    CONTACT_RATELIMITS = "10 per minute"
    LOGIN_RATELIMITS = "10 per 5 minutes"
    CHAT_RATELIMITS = "30 per minute"

    CONTENT_SECURITY_POLICY = {
        'default-src': ['\'self\''],
        'img-src': ['\'self\'', 'data:'],
        'style-src': ['\'self\'', 'https://fonts.googleapis.com', '\'unsafe-inline\''],
        'font-src': ['\'self\'', 'https://fonts.gstatic.com'],
        'frame-ancestors': ['\'none\'']
    }
    TALISMAN_FORCE_HTTPS = False

    INITIAL_ADMIN_EMAIL = os.environ.get('INITIAL_ADMIN_EMAIL')
    INITIAL_ADMIN_PASSWORD = os.environ.get('INITIAL_ADMIN_PASSWORD')

    # Hero slider on the home page
    HERO_SLIDER_INTERVAL_MS = int(os.environ.get('HERO_SLIDER_INTERVAL_MS', 6000))
    HERO_SLIDER_MAX_IMAGES = 5

    CHAT_MAX_MESSAGE_LENGTH = 1000
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100


class DevelopmentConfig(Config):
    DEBUG = True
    ENV_NAME = 'development'
    LOG_LEVEL = 'DEBUG'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DEV_DATABASE_URL') or \
        'sqlite:///' + os.path.join(PROJECT_ROOT, 'instance', 'dev_ftl.sqlite3')
    # Mailhog/local SMTP server for development
    MAIL_SERVER = os.environ.get('DEV_MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('DEV_MAIL_PORT', 1025))
    MAIL_USE_TLS = False
    MAIL_USE_SSL = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    ENV_NAME = 'testing'
    SQLALCHEMY_DATABASE_URI = os.environ.get('TEST_DATABASE_URL', 'sqlite:///:memory:')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5) # Shorter tokens for testing
    MAIL_SERVER = None
    ADMIN_EMAIL = None
    RATELIMIT_ENABLED = False # Disable rate limits for testing
    TALISMAN_FORCE_HTTPS = False
    INITIAL_ADMIN_EMAIL = 'admin@test.ftl.org.in'
    INITIAL_ADMIN_PASSWORD = 'test_password_ftl123'


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False
    ENV_NAME = 'production'
    SERVE_CLIENT_BUILD = True
    TALISMAN_FORCE_HTTPS = os.environ.get('TALISMAN_FORCE_HTTPS', 'false').lower() in ('true', '1', 't')
    CORS_ORIGINS = [
        Config.CLIENT_URL,
        'https://ftl.org.in',
        'https://www.ftl.org.in'
    ]


config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig,
    default=DevelopmentConfig
)


def get_environment_name():
    """NODE_ENV names the environment; FLASK_ENV is honoured when it is absent."""
    return os.getenv('NODE_ENV') or os.getenv('FLASK_ENV') or 'development'


def validate_production_config(config_instance):
    if config_instance.SECRET_KEY == DEFAULT_SECRET_KEY:
        raise ValueError("Production SECRET_KEY is not set or is using the default value.")
    if config_instance.JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        raise ValueError("Production JWT_SECRET_KEY is not set or is using the default value.")
    if config_instance.RATELIMIT_STORAGE_URI == "memory://":
        logger.warning("RATELIMIT_STORAGE_URI is 'memory://' for production. Consider Redis when running several workers.")
    if not config_instance.MAIL_SERVER or not config_instance.ADMIN_EMAIL:
        logger.warning("MAIL_SERVER or ADMIN_EMAIL is not configured. Admin notifications are disabled.")


def get_config_by_name(config_name_str=None):
    """
    Retrieves a configuration instance by name.
    Creates necessary directories defined in the config.
    """
    if config_name_str is None:
        config_name_str = get_environment_name()

    SelectedConfigClass = config_by_name.get(config_name_str.lower())
    if not SelectedConfigClass:
        logger.warning(f"Config name '{config_name_str}' not found. Using default.")
        SelectedConfigClass = config_by_name['default']

    config_instance = SelectedConfigClass()

    if isinstance(config_instance, ProductionConfig):
        validate_production_config(config_instance)

    # --- Create directories defined in the config instance ---
    sqlite_uri = config_instance.SQLALCHEMY_DATABASE_URI
    paths_to_create = [
        os.path.dirname(sqlite_uri.replace('sqlite:///', ''))
            if sqlite_uri.startswith('sqlite:///') and not sqlite_uri.endswith(':memory:')
            else None,
        os.path.dirname(config_instance.LOG_FILE) if config_instance.LOG_FILE else None
    ]
    for path in paths_to_create:
        if path:
            try:
                os.makedirs(path, exist_ok=True)
            except OSError as e:
                logger.warning(f"Could not create directory {path}: {e}")

    return config_instance
