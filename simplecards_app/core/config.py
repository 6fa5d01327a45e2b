# File: simplecards_app/core/config.py
# Core Infrastructure Layer: application configuration

import os
from dotenv import load_dotenv

load_dotenv()

# File này nằm ở simplecards_app/core/ nên cần đi lên 2 cấp để tới gốc dự án
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "simplecards.db")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """SimpleCards application settings."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Giới hạn kích thước file CSV tải lên (1 MB)
    MAX_CONTENT_LENGTH = 1 << 20

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_TO_FILE = _env_bool('LOG_TO_FILE', True)
    LOG_JSON = _env_bool('LOG_JSON', False)

    # Quizlet scraping
    QUIZLET_BASE_URL = os.environ.get('QUIZLET_BASE_URL', 'https://quizlet.com/webapi/3.4')
    QUIZLET_FETCH_ATTEMPTS = 10
    QUIZLET_RETRY_DELAY = 0.2
    QUIZLET_REQUEST_TIMEOUT = 30

    # Background import pools
    QUIZLET_IMPORT_WORKERS = int(os.environ.get('QUIZLET_IMPORT_WORKERS', 4))
    CSV_IMPORT_WORKERS = int(os.environ.get('CSV_IMPORT_WORKERS', 2))
    IMPORT_QUEUE_SIZE = 64
    IMPORT_WORKERS_AUTOSTART = True

    @classmethod
    def init_app(cls, app):
        """Khởi tạo các thư mục cần thiết."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        if app.config.get('LOG_TO_FILE'):
            os.makedirs(app.config['LOG_DIR'], exist_ok=True)
