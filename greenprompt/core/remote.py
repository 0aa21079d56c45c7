"""Gemini-backed prompt rewriter.

The remote service is asked for a conservative edit only. Every way the call
can go wrong is returned as a :class:`RemoteFailure` so the caller can fall
back to the rule-based optimizer; nothing here raises to the caller.
"""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from greenprompt.config import Settings
from greenprompt.nl import nl_data

logger = logging.getLogger(__name__)

EDIT_INSTRUCTION = """You are a text editor. Do NOT remove any content from the following text. \
Do not cut the original prompt. The edited prompt must have the same meaning as the original prompt. \
Only do these 4 things:

1. Fix obvious spelling mistakes (like "teh" -> "the")
2. Fix obvious grammar errors
3. Remove ONLY these specific filler words IF they appear: {fillers}
4. Use high level English vocabulary

DO NOT:
- Remove any facts, data, or information
- Shorten sentences
- Change the meaning
- Remove any instructions or details
- Cut any content

Return the EXACT same text with only the above minor fixes.

Original text: "{prompt}"

Edited text (same content, minor fixes only):"""

_PREAMBLE = re.compile(r'^(?:' + '|'.join(re.escape(p) for p in nl_data.response_preambles) + r')', re.IGNORECASE)
_SURROUNDING_QUOTES = re.compile(r'^["\'“]|["\'”]$')


class RemoteFailureReason(str, Enum):
    NO_CREDENTIAL = "no-credential"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    MALFORMED_RESPONSE = "malformed-response"


@dataclass(frozen=True)
class RemoteText:
    text: str


@dataclass(frozen=True)
class RemoteFailure:
    reason: RemoteFailureReason
    detail: str = ""


RemoteResult = Union[RemoteText, RemoteFailure]


class RemoteOptimizer:
    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self._client = client

    @property
    def endpoint(self) -> str:
        base_url = self.settings.gemini_base_url.rstrip('/')
        return f"{base_url}/models/{self.settings.gemini_model}:generateContent"

    def build_instruction(self, prompt: str) -> str:
        fillers = ", ".join(f'"{word}"' for word in nl_data.remote_fillers)
        return EDIT_INSTRUCTION.format(fillers=fillers, prompt=prompt)

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        max_output_tokens = max(self.settings.min_output_tokens,
                                math.ceil(len(prompt) * self.settings.output_length_factor))
        return {
            "contents": [{"parts": [{"text": self.build_instruction(prompt)}]}],
            "generationConfig": {
                "temperature": self.settings.temperature,
                "topP": self.settings.top_p,
                "maxOutputTokens": max_output_tokens,
            },
        }

    @staticmethod
    def extract_text(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return None
        content = candidates[0].get("content")
        if not isinstance(content, dict):
            return None
        parts = content.get("parts")
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None
        text = parts[0].get("text")
        return text if isinstance(text, str) else None

    @staticmethod
    def clean_response(text: str) -> str:
        result = _PREAMBLE.sub('', text.strip()).strip()
        return _SURROUNDING_QUOTES.sub('', result).strip()

    def _post(self, client: httpx.Client, payload: Dict[str, Any]) -> httpx.Response:
        response = client.post(
            self.endpoint,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "x-goog-api-key": self.settings.gemini_api_key.strip(),
            },
            timeout=self.settings.remote_timeout,
        )
        response.raise_for_status()
        return response

    def rewrite(self, prompt: str, target_model: str = "gpt4") -> RemoteResult:
        if not self.settings.remote_configured:
            logger.info("Gemini API key not configured")
            return RemoteFailure(RemoteFailureReason.NO_CREDENTIAL)

        logger.info("Requesting remote rewrite from %s (target model %s)", self.settings.gemini_model, target_model)
        payload = self.build_payload(prompt)
        try:
            if self._client is not None:
                response = self._post(self._client, payload)
            else:
                with httpx.Client(timeout=self.settings.remote_timeout) as client:
                    response = self._post(client, payload)
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Remote rewrite timed out after %.1fs", self.settings.remote_timeout)
            return RemoteFailure(RemoteFailureReason.TIMEOUT, str(e))
        except httpx.HTTPError as e:
            logger.warning("Remote rewrite failed: %s", e)
            return RemoteFailure(RemoteFailureReason.UNAVAILABLE, str(e))
        except ValueError as e:
            logger.warning("Remote rewrite returned a non-JSON body")
            return RemoteFailure(RemoteFailureReason.MALFORMED_RESPONSE, str(e))

        text = self.extract_text(data)
        cleaned = self.clean_response(text) if text else ""
        if not cleaned:
            logger.warning("Remote rewrite returned no usable candidate")
            return RemoteFailure(RemoteFailureReason.MALFORMED_RESPONSE, "no candidate text")
        return RemoteText(cleaned)
