import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/homewatch.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Local timezone for the activity timeline (day boundary and HH:MM labels)
TIMEZONE = os.getenv("TIMEZONE", "Europe/Amsterdam")

# Vendor bridge proxy
HUE_PROXY_URL = os.getenv("HUE_PROXY_URL", "")
HUE_ACCESS_TOKEN = os.getenv("HUE_ACCESS_TOKEN", "")
HUE_USERNAME = os.getenv("HUE_USERNAME", "")

POLL_INTERVAL_SECONDS = int(os.getenv("POLL_INTERVAL_SECONDS", "60"))
