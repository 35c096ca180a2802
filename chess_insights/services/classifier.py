# chess_insights/services/classifier.py
from enum import Enum
from typing import Optional


class Outcome(Enum):
  WIN = 1
  DRAW = 0
  LOSS = -1
  UNKNOWN = None

  @property
  def status(self) -> Optional[int]:
    """Signed status stored on events; None for UNKNOWN."""
    return self.value


# chess.com per-side result codes
WIN_CODES = frozenset({"win"})
DRAW_CODES = frozenset({
  "agreed",
  "repetition",
  "stalemate",
  "insufficient",
  "50move",
  "timevsinsufficient",
})
LOSS_CODES = frozenset({
  "checkmated",
  "timeout",
  "resigned",
  "abandoned",
  "lose",
})


def classify(result_code: Optional[str]) -> Outcome:
  if not result_code:
    return Outcome.UNKNOWN
  if result_code in WIN_CODES:
    return Outcome.WIN
  if result_code in DRAW_CODES:
    return Outcome.DRAW
  if result_code in LOSS_CODES:
    return Outcome.LOSS
  return Outcome.UNKNOWN
