"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── MongoDB ───────────────────────────────────────────────
MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "db_library")
MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

# Stable API version to pin; an empty value disables the pin.
MONGO_SERVER_API: str = os.getenv("MONGO_SERVER_API", "1")

# ── Collections ───────────────────────────────────────────
BOOKS_COLLECTION: str = "books"
AUTHORS_COLLECTION: str = "authors"

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
