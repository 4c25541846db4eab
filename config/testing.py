SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "attendance_tracker_test",
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
# memory backend: load the demo instructor, courses and students
AUTO_SEED_DB = True

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
FACE_MATCH_POLICY = "always_accept"
FACE_MATCH_THRESHOLD = 0.6

SESSION_HOURS = 24

LOG_LEVEL = "WARNING"
LOG_DIR = None
