# co2survey/config.py
from dotenv import load_dotenv
from pathlib import Path
import logging
import os

# Load .env as early as possible
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DATA_DIR / 'co2survey.db'}")

SUPER_ADMIN_EMAIL = os.environ.get("SUPER_ADMIN_EMAIL", "admin@acbay.at")
SUPER_ADMIN_PASSWORD = os.environ.get("SUPER_ADMIN_PASSWORD", "Admin123!")
IMPORT_USER_EMAIL = os.environ.get("IMPORT_USER_EMAIL", "import@acbay.at")

EMISSION_FILE = Path(os.environ.get("EMISSION_FILE", DATA_DIR / "emissionen_nach_typ.xlsx"))
SURVEY_FILE = Path(os.environ.get("SURVEY_FILE", DATA_DIR / "auswertung_umfrage.xlsx"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure root logger. Safe to call multiple times.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
