
import os
from pathlib import Path
from dotenv import load_dotenv
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent  # <project>
INSTANCE_DIR = BASE_DIR / "instance"


def _default_sqlite_uri():
    return f"sqlite:///{(INSTANCE_DIR / 'staff_manager.db').as_posix()}"


def _flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or _default_sqlite_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "")

    # reports
    REPORT_TITLE = os.getenv("REPORT_TITLE", "Tibrewal Staff Manager")
    SUPPORT_PHONE = os.getenv("SUPPORT_PHONE", "6203229118")
    PDF_FONT_PATH = os.getenv("PDF_FONT_PATH", "")

    # "mark unpaid" leaves advances deducted unless this is switched on
    UNPAID_RESTORES_ADVANCES = _flag("UNPAID_RESTORES_ADVANCES")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"
    LOG_FILE = ""
    PDF_FONT_PATH = ""
    UNPAID_RESTORES_ADVANCES = False


def ensure_instance(app):
    # Flask instance path + default sqlite folder
    os.makedirs(app.instance_path, exist_ok=True)
    INSTANCE_DIR.mkdir(parents=True, exist_ok=True)
