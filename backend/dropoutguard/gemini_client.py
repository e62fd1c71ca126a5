from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx

from .settings import settings

logger = logging.getLogger(__name__)

AI_STUDIO_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
VERTEX_URL = (
	"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}"
	"/publishers/google/models/{model}:generateContent"
)


def _candidate_text(r: httpx.Response) -> str:
	try:
		return r.json()["candidates"][0]["content"]["parts"][0]["text"]
	except (ValueError, KeyError, IndexError, TypeError) as exc:
		raise RuntimeError(f"Unexpected Gemini response: {r.text}") from exc


class GeminiClient:
	"""Async client for Gemini generateContent with an optional OpenRouter fallback."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: float = 30,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		self._auth_params: Dict[str, str] = {}
		self._auth_headers: Dict[str, str] = {}
		if self.provider == "vertex":
			# Vertex AI Express takes the key as a header
			self.base_url = base_url or VERTEX_URL.format(
				region=settings.vertex_region,
				project=settings.vertex_project or "placeholder-project",
				model=self.model,
			)
			self._auth_headers["x-goog-api-key"] = self.api_key
		else:
			self.base_url = base_url or AI_STUDIO_URL.format(model=self.model)
			self._auth_params["key"] = self.api_key
		self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		if settings.openrouter_api_key:
			self._fallback_client = httpx.AsyncClient(timeout=timeout, transport=transport)

	async def __aenter__(self) -> "GeminiClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def generate(self, prompt: str, *, json_output: bool = False, temperature: Optional[float] = None) -> str:
		config: Dict[str, Any] = {}
		if json_output:
			config["responseMimeType"] = "application/json"
		if temperature is not None:
			config["temperature"] = temperature
		try:
			return await self._generate_content(prompt, config)
		except Exception as exc:
			if self._fallback_client is None:
				raise
			logger.warning("Gemini call failed (%s); trying OpenRouter", exc)
			return await self._openrouter_generate(prompt, exc)

	async def _post(self, prompt: str, config: Dict[str, Any]) -> httpx.Response:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		if config:
			payload["generationConfig"] = config
		return await self._client.post(self.base_url, params=self._auth_params, headers=self._auth_headers, json=payload)

	async def _generate_content(self, prompt: str, config: Dict[str, Any]) -> str:
		r = await self._post(prompt, config)
		if r.status_code == 400 and "responseMimeType" in config:
			# Models without JSON mode answer 400; retry once keeping the other settings
			config = {k: v for k, v in config.items() if k != "responseMimeType"}
			r = await self._post(prompt, config)
		r.raise_for_status()
		return _candidate_text(r)

	async def _openrouter_generate(self, prompt: str, primary_error: Exception) -> str:
		assert self._fallback_client is not None
		headers = {
			"Authorization": f"Bearer {settings.openrouter_api_key}",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		payload = {
			"model": settings.openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		try:
			r = await self._fallback_client.post(settings.openrouter_base_url, headers=headers, json=payload)
			r.raise_for_status()
			return r.json()["choices"][0]["message"]["content"]
		except httpx.TimeoutException:
			# Timeouts propagate unwrapped
			raise
		except Exception as exc:
			raise RuntimeError(
				f"Gemini call failed ({primary_error}); fallback via OpenRouter also failed"
			) from exc
