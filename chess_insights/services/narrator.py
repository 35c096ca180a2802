# chess_insights/services/narrator.py
from dataclasses import dataclass
from typing import Optional, Protocol

from chess_insights.models import AggregationResult, Streak
from chess_insights.util.log import get_logger

log = get_logger("chess_insights.narrator", "NARRATOR")

SOURCE_HEURISTIC = "heuristic"

TIME_CONTROL_TIPS = {
  "bullet": "In bullet, focus on pre-moves in obvious positions and maintain piece activity over material.",
  "blitz": "In blitz, prioritize fast opening development and avoid complicated tactics under time pressure.",
  "rapid": "In rapid, take time to calculate tactical sequences and avoid impulsive moves in the middlegame.",
}

SYSTEM_PROMPT = (
  "You are a chess coach. Focus on chess-specific concepts: openings, tactics, strategy, "
  "time management, endgames. Keep responses under 150 words with 3 clear points."
)


@dataclass(frozen=True)
class PromptConfig:
  system_prompt: str = SYSTEM_PROMPT
  max_tokens: int = 300
  temperature: float = 0.4


@dataclass(frozen=True)
class Narration:
  text: str
  source: str


class LlmNarrator(Protocol):
  source: str

  def summarize(self, stats: AggregationResult, prompt: PromptConfig) -> str:
    """Free text for `stats`; raises on any failure."""
    ...


# ----------------------------
# Formatting helpers
# ----------------------------
def _pct1(x: float) -> str:
  return f"{x * 100:.1f}%"

def _days(n: int) -> str:
  return f"{n} Day" if n == 1 else f"{n} Days"

def describe_streak(streak: Streak) -> str:
  if streak.type == "none" or streak.length <= 0:
    return "none"
  if streak.type == "win":
    return f"{streak.length} win" if streak.length == 1 else f"{streak.length} wins"
  return f"{streak.length} loss" if streak.length == 1 else f"{streak.length} losses"

def time_control_tip(bucket: str) -> str:
  tip = TIME_CONTROL_TIPS.get(bucket)
  if tip:
    return tip
  return f"Your strongest format is {bucket}. Continue playing this to maximize rating gains."

def no_games_message(window_days: int) -> str:
  suffix = "day" if window_days == 1 else f"{window_days} days"
  return f"No games found in the last {suffix}. Play some games to see insights!"


def render_heuristic(stats: AggregationResult) -> str:
  if stats.total == 0 or stats.most_played is None or stats.weakest is None:
    return no_games_message(stats.window_days)

  best = stats.most_played
  worst = stats.weakest
  lines = [
    f"Chess Performance (Last {_days(stats.window_days)})",
    "",
    f"Record: {stats.wins}W-{stats.draws}D-{stats.losses}L ({_pct1(stats.win_rate)} win rate)",
    f"Most played: {best.bucket} ({best.games} games, {_pct1(best.win_rate)} WR)",
    f"Weakest format: {worst.bucket} ({_pct1(worst.win_rate)} WR)",
    f"Current streak: {describe_streak(stats.current_streak)}",
    f"Longest win streak: {stats.longest_win_streak}",
    "",
    "Tips:",
    time_control_tip(best.bucket),
    "",
    f"Focus on your strongest time control ({best.bucket}) for rating gains. "
    f"Review your last 3 losses in {worst.bucket} to identify tactical patterns.",
  ]
  return "\n".join(lines)


def user_prompt(stats: AggregationResult) -> str:
  breakdown = ", ".join(
    f"{b.bucket}: {b.wins}W-{b.draws}D-{b.losses}L ({_pct1(b.win_rate)})" for b in stats.buckets
  ) or "none"
  return (
    "You are an expert chess coach analyzing a player's recent performance. "
    "Be specific about chess concepts.\n\n"
    f"Data (Last {_days(stats.window_days)}):\n"
    f"Total: {stats.total} games ({stats.wins}W-{stats.draws}D-{stats.losses}L, {_pct1(stats.win_rate)} win rate)\n"
    f"Time Controls: {breakdown}\n"
    f"Current Streak: {describe_streak(stats.current_streak)}\n"
    f"Longest Win Streak: {stats.longest_win_streak}\n\n"
    "Provide exactly 3 chess-focused insights (max 150 words total):\n"
    "1. Performance pattern: time control strengths and weaknesses\n"
    "2. Strategic advice: openings, tactics, time management or endgames\n"
    "3. One specific, actionable training recommendation"
  )


def narrate(
    stats: AggregationResult,
    llm: Optional[LlmNarrator] = None,
    prompt: Optional[PromptConfig] = None,
) -> Narration:
  """LLM text when available and working, otherwise the heuristic text. Never raises for LLM failures."""
  heuristic = render_heuristic(stats)
  if llm is None or stats.total == 0:
    return Narration(text=heuristic, source=SOURCE_HEURISTIC)

  try:
    text = (llm.summarize(stats, prompt or PromptConfig()) or "").strip()
  except Exception as e:
    log.warning("LLM narration failed, using heuristic: %s", e)
    return Narration(text=heuristic, source=SOURCE_HEURISTIC)

  if not text:
    log.warning("LLM narration returned empty text, using heuristic")
    return Narration(text=heuristic, source=SOURCE_HEURISTIC)
  return Narration(text=text, source=llm.source)
