# chess_insights/config.py
import os
from dotenv import load_dotenv

load_dotenv()

#storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./chess_insights.db")

#chess.com public API
CHESSCOM_API_BASE = os.getenv("CHESSCOM_API_BASE", "https://api.chess.com/pub").rstrip("/")
CHESSCOM_USER_AGENT = os.getenv(
  "CHESSCOM_USER_AGENT",
  "chess-insights/0.1 (+https://github.com/chess-insights)",
)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

# only the newest monthly archives are ingested, never a full backfill
ARCHIVE_LIMIT = int(os.getenv("CHESS_ARCHIVE_LIMIT", "2"))

FETCH_MAX_ATTEMPTS = int(os.getenv("FETCH_MAX_ATTEMPTS", "3"))
FETCH_BACKOFF_SECONDS = float(os.getenv("FETCH_BACKOFF_SECONDS", "0.5"))

#event tags
SERVICE = "chess"
EVENT_TYPE = "request"
UNKNOWN_BUCKET = "unknown"

#windows (days)
DEFAULT_WINDOW_DAYS = 7
MAX_WINDOW_DAYS = 365
KPI_WINDOW_DAYS = 7
DAILY_WINDOW_DAYS = 30
HISTORY_WINDOW_DAYS = 60

#narrator: "heuristic" | "bedrock"
NARRATOR_BACKEND = os.getenv("NARRATOR_BACKEND", "heuristic").strip().lower()

#BedRock
AWS_REGION = os.getenv("AWS_REGION", "us-east-2")
AWS_PROFILE = os.getenv("AWS_PROFILE") or None
BEDROCK_MODEL_ID = os.getenv("BEDROCK_MODEL_ID", "anthropic.claude-3-5-sonnet-20240620-v1:0")
BEDROCK_INFERENCE_PROFILE_ARN = os.getenv("BEDROCK_INFERENCE_PROFILE_ARN", "").strip()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
