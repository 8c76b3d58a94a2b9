"""Amazon Bedrock AI provider adapter.

Calls the Bedrock runtime ``invoke`` endpoint directly with ``httpx``::

    POST https://bedrock-runtime.{region}.amazonaws.com/model/{model}/invoke

Each request is signed with AWS Signature Version 4 (service ``bedrock``)
using botocore's signer and the standard AWS credential chain (env vars,
shared config/credentials files, container and instance roles).

The request body and reply shape depend on the model family; see
:mod:`suggestor.providers.ai.dialects`.
"""

from __future__ import annotations

import json
from urllib.parse import quote

import botocore.session
import httpx
import structlog
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError

from suggestor.config.schema import AISection
from suggestor.providers.ai.base import CompletionAIProvider
from suggestor.providers.ai.dialects import classify_model
from suggestor.utils.errors import ProviderError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MODEL = "anthropic.claude-3-sonnet-20240229-v1:0"
DEFAULT_REGION = "us-east-1"
SIGNING_SERVICE = "bedrock"


class BedrockAIProvider(CompletionAIProvider):
    """AI provider backed by a model hosted on Amazon Bedrock.

    Parameters
    ----------
    config:
        The ``ai`` configuration section (model, region, timeouts).
    credentials:
        Explicit AWS credentials.  When omitted they are resolved from the
        default botocore credential chain.
    client:
        Optional pre-built HTTP client (tests inject a MockTransport).
    """

    def __init__(
        self,
        config: AISection,
        credentials: Credentials | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._model = config.model or DEFAULT_MODEL
        self._dialect = classify_model(self._model)

        session = botocore.session.get_session()
        self._region = config.region or session.get_config_variable("region") or DEFAULT_REGION
        self._credentials = credentials
        if self._credentials is None:
            try:
                self._credentials = session.get_credentials()
            except BotoCoreError as exc:
                logger.error("bedrock_credentials_unavailable", error=str(exc))

        self._url = (
            f"https://bedrock-runtime.{self._region}.amazonaws.com"
            f"/model/{quote(self._model, safe='')}/invoke"
        )
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.read_timeout, connect=config.conn_timeout),
        )
        logger.info(
            "bedrock_provider_initialized",
            model=self._model,
            region=self._region,
            dialect=self._dialect.name,
        )

    # ------------------------------------------------------------------
    # CompletionAIProvider implementation
    # ------------------------------------------------------------------

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        body = json.dumps(self._dialect.build_body(system_prompt, user_prompt)).encode("utf-8")
        headers = self._sign(body)

        try:
            response = await self._client.post(self._url, content=body, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(
                message=f"failed to invoke bedrock: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != 200:
            raise ProviderError(
                message=f"bedrock returned status {response.status_code}: {response.text}",
                provider_name=self.get_provider_name(),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                message=f"failed to decode {self._dialect.name} response: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text = self._dialect.extract_text(payload)
        logger.info(
            "bedrock_completion",
            model=self._model,
            dialect=self._dialect.name,
            chars=len(text),
        )
        return text

    def get_provider_name(self) -> str:
        return "bedrock"

    def get_model(self) -> str:
        return self._model

    def is_available(self) -> bool:
        """Return ``True`` if AWS credentials were found (doesn't verify them)."""
        return self._credentials is not None

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _sign(self, body: bytes) -> dict[str, str]:
        """Return SigV4-signed headers for a POST of ``body`` to the invoke URL."""
        if self._credentials is None:
            raise ProviderError(
                message="failed to retrieve credentials",
                provider_name=self.get_provider_name(),
            )
        request = AWSRequest(
            method="POST",
            url=self._url,
            data=body,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            frozen = self._credentials.get_frozen_credentials()
            SigV4Auth(frozen, SIGNING_SERVICE, self._region).add_auth(request)
        except BotoCoreError as exc:
            raise ProviderError(
                message=f"failed to sign request: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return dict(request.headers.items())
