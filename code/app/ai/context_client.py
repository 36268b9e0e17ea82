import logging
import os
from typing import Any, Dict
from urllib.parse import urlparse, urlunparse

import requests
from openai import OpenAI

logger = logging.getLogger(__name__)

# Gemini serves an OpenAI-compatible chat completions API under this path.
CONTEXT_BASE_URL = os.getenv("CONTEXT_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
CONTEXT_MODEL = os.getenv("CONTEXT_MODEL", "gemini-2.5-flash")
CONTEXT_TIMEOUT = float(os.getenv("CONTEXT_TIMEOUT", "25"))
CONTEXT_HEALTH_TIMEOUT = float(os.getenv("CONTEXT_HEALTH_TIMEOUT", "1.0"))
CONTEXT_MAX_RETRIES = max(0, int(os.getenv("CONTEXT_MAX_RETRIES", "0")))
CONTEXT_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or os.getenv("OPENAI_API_KEY")
CONTEXT_DEFAULT_MAX_TOKENS = int(os.getenv("CONTEXT_MAX_TOKENS", "800"))


def is_api_key_configured() -> bool:
    return isinstance(CONTEXT_API_KEY, str) and CONTEXT_API_KEY.strip() != ""


def _base_url() -> str:
    parsed = urlparse(CONTEXT_BASE_URL)
    path = parsed.path.rstrip("/")
    if path.endswith("/chat/completions"):
        path = path[: -len("/chat/completions")]
    elif path.endswith("/completions"):
        path = path[: -len("/completions")]
    base = parsed._replace(path=path, params="", query="", fragment="")
    return urlunparse(base)


def _get_client() -> OpenAI:
    return OpenAI(base_url=_base_url(), api_key=CONTEXT_API_KEY, max_retries=CONTEXT_MAX_RETRIES)


def check_context_service_online(timeout: float | None = None) -> bool:
    base = _base_url().rstrip("/")
    health_timeout = timeout if timeout is not None else CONTEXT_HEALTH_TIMEOUT
    headers = {"Authorization": f"Bearer {CONTEXT_API_KEY}"} if CONTEXT_API_KEY else {}
    for path in ("/models", "/health"):
        try:
            resp = requests.get(f"{base}{path}", timeout=health_timeout, headers=headers)
        except requests.RequestException as exc:
            logger.debug("Context service probe %s failed: %s", path, exc)
            continue
        # Any non-5xx HTTP response means the endpoint is reachable.
        if resp.status_code < 500:
            return True
    return False


def query_context_model(
    prompt: str,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> Dict[str, Any]:
    if not is_api_key_configured():
        raise RuntimeError("Missing GEMINI_API_KEY. Set the environment variable and restart the app.")

    client = _get_client()
    token_limit = int(max_tokens) if max_tokens is not None else CONTEXT_DEFAULT_MAX_TOKENS
    logger.debug("Requesting context from %s (model=%s)", _base_url(), CONTEXT_MODEL)
    response = client.chat.completions.create(
        model=CONTEXT_MODEL,
        messages=[{"role": "user", "content": prompt}],
        temperature=0.2 if temperature is None else float(temperature),
        max_tokens=token_limit,
        timeout=CONTEXT_TIMEOUT,
    )
    return response.model_dump()


def extract_text(response: Dict[str, Any]) -> str:
    choices = response.get("choices") or []
    if not choices:
        return ""
    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
        return ""
    text = choice.get("text") if isinstance(choice, dict) else None
    if text:
        return str(text).strip()
    return ""
