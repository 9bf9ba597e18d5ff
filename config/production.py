import os

from config import parse_cookies

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "url": os.getenv("API_URL", "http://localhost:4000/api"),
    "locale": os.getenv("API_LOCALE", "fr"),
    "timeout": float(os.getenv("API_TIMEOUT", "20")),
    "cookies": parse_cookies(os.getenv("API_COOKIES", "")),
}

ATTENDANCE_AUTOSAVE_SECONDS = float(os.getenv("ATTENDANCE_AUTOSAVE_SECONDS", "1.2"))
ANSWERS_AUTOSAVE_SECONDS = float(os.getenv("ANSWERS_AUTOSAVE_SECONDS", "1.2"))

OFFLINE_QUEUE_PATH = os.getenv("OFFLINE_QUEUE_PATH") or None

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
