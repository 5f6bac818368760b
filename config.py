import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-this')
    # Absolute path to database folder, works even if the project is moved
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DB_PATH = os.path.join(BASE_DIR, "database", "marketplace.db")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        f"sqlite:///{DB_PATH.replace(os.sep, '/')}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Matching
    MATCH_LIMIT = 20
    FEED_PAGE_SIZE = 10
    FEED_MAX_PAGE_SIZE = 50
    COMPLETION_REMINDER_THRESHOLD = 70

    # Dashboard
    DASHBOARD_MATCHES = 5
    DASHBOARD_NOTIFICATIONS = 10
