import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "url": os.getenv("API_URL", "http://api.test/api"),
    "locale": "fr",
    "timeout": 5,
    "cookies": {},
}

ATTENDANCE_AUTOSAVE_SECONDS = 1.2
ANSWERS_AUTOSAVE_SECONDS = 1.2

OFFLINE_QUEUE_PATH = None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
