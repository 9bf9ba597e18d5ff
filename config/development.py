import os

from config import parse_cookies

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "url": os.getenv("API_URL", "http://localhost:4000/api"),
    "locale": os.getenv("API_LOCALE", "fr"),
    "timeout": float(os.getenv("API_TIMEOUT", "20")),
    "cookies": parse_cookies(os.getenv("API_COOKIES", "")),
}

# Quiet period before edits are pushed to the API
ATTENDANCE_AUTOSAVE_SECONDS = float(os.getenv("ATTENDANCE_AUTOSAVE_SECONDS", "1.2"))
ANSWERS_AUTOSAVE_SECONDS = float(os.getenv("ANSWERS_AUTOSAVE_SECONDS", "1.2"))

# Bulk-mark writes that fail on transport are kept here for replay
OFFLINE_QUEUE_PATH = os.getenv("OFFLINE_QUEUE_PATH", "instance/attendance-queue.json")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
