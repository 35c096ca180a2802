import logging

from chess_insights.config import LOG_LEVEL


def get_logger(name: str, tag: str) -> logging.Logger:
  """Named logger with a single "[TAG] LEVEL: message" stream handler."""
  log = logging.getLogger(name)
  if not log.handlers:
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(f"[{tag}] %(levelname)s: %(message)s"))
    log.addHandler(h)
    log.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
  return log
