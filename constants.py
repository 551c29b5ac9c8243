import os

from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

EXECUTION_API_URL = os.getenv("EXECUTION_API_URL", "https://emkc.org/api/v2/piston/execute")
EXECUTION_TIMEOUT_SECONDS = float(os.getenv("EXECUTION_TIMEOUT_SECONDS", 10))

DEFAULT_CODE = os.getenv("DEFAULT_CODE", "// start code here")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)
