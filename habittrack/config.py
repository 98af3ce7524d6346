import os

# ----- Configuration -----
# "sqlite://" is an in-memory database shared through a single connection.
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite://")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
STATS_WINDOW_DAYS = int(os.environ.get("STATS_WINDOW_DAYS", "30"))

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8000"))
