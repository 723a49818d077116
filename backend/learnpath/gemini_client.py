from __future__ import annotations
import json
import logging
import re
import httpx
from typing import Any, Dict, Optional
from .errors import UpstreamGenerationError
from .settings import settings

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def extract_json(text: str) -> Any:
	"""Parse model output that should be JSON, tolerating fences and chatter."""
	if not isinstance(text, str) or not text.strip():
		raise UpstreamGenerationError("Model returned an empty response")
	try:
		return json.loads(text)
	except ValueError:
		pass
	fenced = _CODE_FENCE.search(text)
	if fenced:
		try:
			return json.loads(fenced.group(1))
		except ValueError:
			pass
	for opener, closer in (("{", "}"), ("[", "]")):
		first = text.find(opener)
		last = text.rfind(closer)
		if first != -1 and last > first:
			try:
				return json.loads(text[first : last + 1])
			except ValueError:
				continue
	raise UpstreamGenerationError("Model did not return valid JSON")


class GeminiClient:
	"""Minimal async client for Gemini generateContent with an OpenRouter fallback.

	Every failure surfaces as UpstreamGenerationError so callers only need one
	except clause before switching to static content.
	"""

	def __init__(self, api_key: Optional[str] = None, *, base_url: Optional[str] = None, model: Optional[str] = None, timeout: float = 30) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise UpstreamGenerationError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		if settings.gemini_provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=timeout)
		self._openrouter_api_key = settings.openrouter_api_key
		self._fallback_client: Optional[httpx.AsyncClient] = (
			httpx.AsyncClient(timeout=timeout) if self._openrouter_api_key else None
		)

	async def __aenter__(self) -> "GeminiClient":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def generate(self, prompt: str) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		payload = {"contents": [{"parts": [{"text": prompt}]}]}
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
			data = r.json()
			return data["candidates"][0]["content"]["parts"][0]["text"]
		except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as err:
			if self._fallback_client is None:
				raise UpstreamGenerationError(f"Gemini call failed: {err}") from err
			logger.warning("Gemini call failed (%s); trying OpenRouter", err)
			return await self._fallback_generate(prompt, err)

	async def generate_json(self, prompt: str) -> Any:
		return extract_json(await self.generate(prompt))

	async def _fallback_generate(self, prompt: str, primary_error: Exception) -> str:
		headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		payload: Dict[str, Any] = {
			"model": settings.openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		try:
			r = await self._fallback_client.post(settings.openrouter_base_url, headers=headers, json=payload)
			r.raise_for_status()
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as err:
			raise UpstreamGenerationError(
				f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
			) from err
