# chess_insights/errors.py


class ChessInsightsError(Exception):
  """Base error; `code` is the stable tag routes and the CLI switch on."""
  code = "internal"


class InvalidInput(ChessInsightsError):
  code = "invalid_input"


class PlayerNotFound(ChessInsightsError):
  code = "player_not_found"

  def __init__(self, username: str):
    self.username = username
    super().__init__(f"User '{username}' not found on Chess.com")


class NoGamesFound(ChessInsightsError):
  code = "no_games_found"

  def __init__(self, username: str):
    self.username = username
    super().__init__(f"No games found for user: {username}")


class FetchFailed(ChessInsightsError):
  code = "fetch_failed"

  def __init__(self, url: str):
    self.url = url
    super().__init__(f"Failed to fetch {url}")


class NarrationFailed(ChessInsightsError):
  code = "narration_failed"


# ----------------------------
# HTTP collaborator signals
# ----------------------------
class NotFound(Exception):
  def __init__(self, url: str):
    self.url = url
    super().__init__(f"404 for {url}")


class TransientError(Exception):
  def __init__(self, url: str, reason: str = ""):
    self.url = url
    self.reason = reason
    super().__init__(f"{url}: {reason}" if reason else url)
