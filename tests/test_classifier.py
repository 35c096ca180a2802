import pytest

from chess_insights.services.classifier import DRAW_CODES, LOSS_CODES, WIN_CODES, Outcome, classify


@pytest.mark.parametrize("code", ["agreed", "repetition", "stalemate", "insufficient", "50move", "timevsinsufficient"])
def test_draw_codes(code):
  assert classify(code) is Outcome.DRAW
  assert classify(code).status == 0


@pytest.mark.parametrize("code", ["checkmated", "timeout", "resigned", "abandoned", "lose"])
def test_loss_codes(code):
  assert classify(code) is Outcome.LOSS
  assert classify(code).status == -1


def test_win_code():
  assert classify("win") is Outcome.WIN
  assert classify("win").status == 1


@pytest.mark.parametrize("code", [None, "", "WIN", "kingofthehill", "bughousepartnerlose", "threecheck", " win"])
def test_unrecognized_codes_are_unknown(code):
  assert classify(code) is Outcome.UNKNOWN
  assert classify(code).status is None


def test_code_sets_are_disjoint():
  assert not (WIN_CODES & DRAW_CODES)
  assert not (WIN_CODES & LOSS_CODES)
  assert not (DRAW_CODES & LOSS_CODES)
