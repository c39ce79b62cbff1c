"""
OpenAI-compatible HTTP capability for streambench.

Streams text completions from OpenAI-compatible servers such as vLLM. Presence is
detected through the health route, availability through the model listing, and
token measurement through the vLLM-style tokenize route. Each non-empty text delta
of the server-sent event stream is reported as one chunk.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx

from streambench.capabilities.capability import (
    AvailabilityState,
    Capability,
    CapabilitySession,
    DownloadProgressCallback,
)
from streambench.logger import logger
from streambench.settings import settings

__all__ = ["DEFAULT_API_PATHS", "OpenAIHTTPCapability", "OpenAIHTTPSession"]


DEFAULT_API_PATHS = {
    "/health": "health",
    "/v1/models": "v1/models",
    "/v1/completions": "v1/completions",
    "/tokenize": "tokenize",
}

# NOTE: This value is taken from httpx's default
FALLBACK_TIMEOUT = 5.0


class OpenAIHTTPSession(CapabilitySession):
    """
    Session bound to one HTTP client against an OpenAI-compatible server.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        target: str,
        model: str,
        api_routes: dict[str, str],
        headers: dict[str, str] | None = None,
        max_tokens: int | None = None,
        extras: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.client = client
        self.target = target
        self.model = model
        self.api_routes = api_routes
        self.headers = headers
        self.max_tokens = max_tokens
        self.extras = extras or {}

    async def measure_tokens(self, text: str) -> int:
        self.check_active()

        response = await self.client.post(
            f"{self.target}/{self.api_routes['/tokenize']}",
            json={"model": self.model, "prompt": text},
            headers=self.headers,
        )
        response.raise_for_status()
        data = response.json()

        if "count" in data:
            return int(data["count"])

        return len(data.get("tokens", []))

    async def stream_generate(self, prompt: str) -> AsyncIterator[str]:  # type: ignore[override]
        self.check_active()

        body: dict[str, Any] = {
            **self.extras,
            "model": self.model,
            "prompt": prompt,
            "stream": True,
        }
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens

        async with self.client.stream(
            "POST",
            f"{self.target}/{self.api_routes['/v1/completions']}",
            json=body,
            headers=self.headers,
        ) as stream:
            stream.raise_for_status()

            async for line in stream.aiter_lines():
                if (data := self.extract_line_data(line)) is None:
                    break

                choices = data.get("choices") or [{}]
                if text := choices[0].get("text"):
                    yield text

    async def close(self):
        await self.client.aclose()

    @staticmethod
    def extract_line_data(line: str) -> dict[str, Any] | None:
        """
        Extract JSON data from a server-sent event line.

        :param line: Raw line from the streaming response
        :return: Parsed JSON data, an empty dict for lines without data, or None
            when the line marks the end of the stream
        """
        if not line or not (line := line.strip()) or not line.startswith("data:"):
            return {}

        line = line[len("data:") :].strip()

        if line == "[DONE]":
            return None

        return json.loads(line)


@Capability.register("openai_http")
class OpenAIHTTPCapability(Capability):
    """
    Capability streaming text completions from an OpenAI-compatible server.

    Example:
    ::
        capability = OpenAIHTTPCapability(
            target="http://localhost:8000", model="meta-llama/Llama-3.1-8B"
        )
        if await capability.probe():
            session = await capability.create_session()
    """

    def __init__(
        self,
        target: str,
        model: str = "",
        api_key: str | None = None,
        api_routes: dict[str, str] | None = None,
        timeout: float | None = None,
        timeout_connect: float | None = FALLBACK_TIMEOUT,
        http2: bool | None = None,
        follow_redirects: bool | None = None,
        verify: bool = False,
        max_tokens: int | None = None,
        extras: dict[str, Any] | None = None,
    ):
        """
        :param target: Base URL of the OpenAI-compatible server
        :param model: Model to generate with; the first listed model if empty
        :param api_key: API key sent as a bearer token
        :param api_routes: Overrides for the server route paths
        :param timeout: Read timeout in seconds
        :param timeout_connect: Connect timeout in seconds
        :param http2: Enable HTTP/2 protocol support
        :param follow_redirects: Follow HTTP redirects automatically
        :param verify: Enable SSL certificate verification
        :param max_tokens: Maximum tokens to generate per response
        :param extras: Additional body fields sent with each completion request
        """
        super().__init__(type_="openai_http")

        if not target:
            raise ValueError("A target URL is required for the openai_http capability.")

        self.target = target.rstrip("/").removesuffix("/v1")
        self.model = model
        self.api_key = api_key
        self.api_routes = {**DEFAULT_API_PATHS, **(api_routes or {})}
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.timeout_connect = timeout_connect
        self.http2 = http2 if http2 is not None else settings.request_http2
        self.follow_redirects = (
            follow_redirects
            if follow_redirects is not None
            else settings.request_follow_redirects
        )
        self.verify = verify
        self.max_tokens = max_tokens
        self.extras = extras

    @property
    def info(self) -> dict[str, Any]:
        return {
            "type": self.type_,
            "target": self.target,
            "model": self.model,
            "timeout": self.timeout,
            "timeout_connect": self.timeout_connect,
            "http2": self.http2,
            "follow_redirects": self.follow_redirects,
            "verify": self.verify,
            "openai_paths": self.api_routes,
            # Auth token excluded for security
        }

    async def probe(self) -> bool:
        async with self._create_client() as client:
            try:
                response = await client.get(
                    f"{self.target}/{self.api_routes['/health']}",
                    headers=self._build_headers(),
                )
                response.raise_for_status()
            except httpx.HTTPError as err:
                logger.warning(f"Capability probe against {self.target} failed: {err}")
                return False

        return True

    async def available_models(self) -> list[str]:
        """
        :return: Model identifiers listed by the server
        :raises httpx.HTTPError: If the models route returns an error
        """
        async with self._create_client() as client:
            response = await client.get(
                f"{self.target}/{self.api_routes['/v1/models']}",
                headers=self._build_headers(),
            )
            response.raise_for_status()

        return [item["id"] for item in response.json()["data"]]

    async def availability(self) -> AvailabilityState:
        try:
            models = await self.available_models()
        except httpx.HTTPError as err:
            logger.warning(f"Could not list models from {self.target}: {err}")
            return "unavailable"

        if (self.model and self.model in models) or (not self.model and models):
            return "available"

        return "unavailable"

    async def create_session(
        self, progress_callback: DownloadProgressCallback | None = None
    ) -> OpenAIHTTPSession:
        if not self.model:
            models = await self.available_models()
            if not models:
                raise RuntimeError(f"No models are served by {self.target}.")
            self.model = models[0]

        # Models are served remotely, there is nothing to download
        if progress_callback is not None:
            await progress_callback(100.0)

        return OpenAIHTTPSession(
            client=self._create_client(),
            target=self.target,
            model=self.model,
            api_routes=self.api_routes,
            headers=self._build_headers(),
            max_tokens=self.max_tokens,
            extras=self.extras,
        )

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            http2=self.http2,
            timeout=httpx.Timeout(
                FALLBACK_TIMEOUT,
                read=self.timeout,
                connect=self.timeout_connect,
            ),
            follow_redirects=self.follow_redirects,
            verify=self.verify,
        )

    def _build_headers(self) -> dict[str, str] | None:
        if not self.api_key:
            return None

        return {"Authorization": f"Bearer {self.api_key}"}
