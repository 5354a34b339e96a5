"""Configuration defaults for the P2PB2B client.

Values are read from the environment. A `.env` file at the project root is
loaded first when it exists, so local credentials can live there.
Explicit constructor arguments always take precedence over these defaults.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent.parent
env_file = project_root / ".env"
if env_file.exists():
    load_dotenv(env_file)

BASE_URL = os.getenv("P2PB2B_BASE_URL", "https://api.p2pb2b.com/api/v2")
WS_URL = os.getenv("P2PB2B_WS_URL", "wss://apiws.p2pb2b.com/")
API_KEY = os.getenv("P2PB2B_API_KEY")
API_SECRET = os.getenv("P2PB2B_API_SECRET")
HTTP_TIMEOUT = float(os.getenv("P2PB2B_HTTP_TIMEOUT", "20.0"))

# Path prefix stamped into the `request` field of signed bodies.
API_PATH_PREFIX = "/api/v2"
