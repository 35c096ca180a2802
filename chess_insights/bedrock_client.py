# chess_insights/bedrock_client.py
import hashlib
import json
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from chess_insights.config import AWS_PROFILE, AWS_REGION, BEDROCK_INFERENCE_PROFILE_ARN, BEDROCK_MODEL_ID
from chess_insights.errors import NarrationFailed
from chess_insights.models import AggregationResult
from chess_insights.services.narrator import PromptConfig, user_prompt
from chess_insights.util.log import get_logger

log = get_logger("chess_insights.bedrock", "BR")

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _cache_key(system_prompt: str, user_text: str, max_tokens: int, temperature: float) -> str:
  h = hashlib.sha256()
  h.update(system_prompt.encode("utf-8")); h.update(b"\x00")
  h.update(user_text.encode("utf-8"));     h.update(b"\x00")
  h.update(str(max_tokens).encode("ascii")); h.update(b"\x00")
  h.update(str(temperature).encode("ascii"))
  return h.hexdigest()

def _extract_text(resp: dict) -> str:
  """
  Bedrock Converse response -> first text block.
  Expected:
  {
    "output": {
      "message": {
        "role": "...",
        "content": [{"text": "..."}]
      }
    }
  }
  """
  out = (resp or {}).get("output") or {}
  msg = out.get("message") or {}
  for block in (msg.get("content") or []):
    if isinstance(block, dict) and "text" in block:
      return block["text"]
  return ""

def make_client(region: str = AWS_REGION, profile: Optional[str] = AWS_PROFILE):
  """Bedrock Runtime client with short timeouts and standard retries."""
  session = boto3.Session(profile_name=profile)
  cfg = Config(
      retries={"max_attempts": 3, "mode": "standard"},
      connect_timeout=5,
      read_timeout=30,
  )
  return session.client("bedrock-runtime", region_name=region, config=cfg)

# -----------------------------------------------------------------------------
# Narrator
# -----------------------------------------------------------------------------
class BedrockNarrator:
  """LLM narrator over Bedrock Converse. Every failure surfaces as NarrationFailed."""

  source = "bedrock"

  def __init__(self, client: Any = None, *, model_id: str = "", use_cache: bool = True):
    self._client = client
    self.model_id = model_id or BEDROCK_INFERENCE_PROFILE_ARN or BEDROCK_MODEL_ID
    self.use_cache = use_cache
    self._cache: Dict[str, str] = {}

  def _cl(self):
    if self._client is None:
      try:
        self._client = make_client()
      except (BotoCoreError, ClientError) as e:
        raise NarrationFailed(f"Bedrock client unavailable: {e}") from e
    return self._client

  def summarize(self, stats: AggregationResult, prompt: PromptConfig) -> str:
    user_text = user_prompt(stats)
    key = _cache_key(prompt.system_prompt, user_text, prompt.max_tokens, prompt.temperature)
    if self.use_cache:
      hit = self._cache.get(key)
      if hit is not None:
        return hit

    req = {
      "messages": [{"role": "user", "content": [{"text": user_text}]}],
      "system": [{"text": prompt.system_prompt}],
      "inferenceConfig": {
        "maxTokens": prompt.max_tokens,
        "temperature": float(prompt.temperature),
      },
    }
    try:
      resp = self._cl().converse(modelId=self.model_id, **req)
    except (BotoCoreError, ClientError, ParamValidationError) as e:
      log.error("Bedrock call failed: %s", e)
      raise NarrationFailed(str(e)) from e

    text = (_extract_text(resp) or "").strip()
    if not text:
      log.warning("Bedrock returned no text: %s", json.dumps(resp.get("output") or {})[:200])
      raise NarrationFailed("empty response")

    if self.use_cache:
      self._cache[key] = text
    return text
