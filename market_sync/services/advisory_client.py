"""
LangChain-based client for the external advisory service.

Uses ChatTongyi (langchain-community) against Alibaba Cloud DashScope.
Single attempt per call with a bounded wait; callers decide how to
degrade when it fails.
"""

import asyncio
from typing import Any

import structlog
from langchain_community.chat_models import ChatTongyi
from langchain_core.messages import HumanMessage, SystemMessage

from ..core.config import Settings
from ..core.exceptions import ExternalServiceError

logger = structlog.get_logger()

SERVICE_NAME = "dashscope"


class AdvisoryClient:
    """
    Sends a system + user prompt and returns the model's text reply.

    Timeout, transport failures and empty replies all surface as
    ExternalServiceError. Task cancellation is not intercepted.
    """

    def __init__(self, settings: Settings, chat_model: Any | None = None):
        """
        Initialize advisory client.

        Args:
            settings: Application settings with API key, model and timeout
            chat_model: Pre-built chat model (tests); ChatTongyi by default
        """
        self.model = settings.advisory_model
        self.timeout_seconds = settings.advisory_timeout_seconds

        if chat_model is None:
            chat_model = ChatTongyi(  # type: ignore[call-arg]  # LangChain stubs incomplete
                model_name=settings.advisory_model,
                dashscope_api_key=settings.dashscope_api_key,
            )
            logger.info("ChatTongyi advisory client initialized", model=self.model)

        self.chat = chat_model

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
    ) -> str:
        """
        Request one completion.

        Args:
            system_prompt: Role instructions
            prompt: Analysis request
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens in response

        Returns:
            Reply text, stripped

        Raises:
            ExternalServiceError: On timeout, service error or empty reply
        """
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=prompt)]
        chat_with_params = self.chat.bind(temperature=temperature, max_tokens=max_tokens)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                response = await chat_with_params.ainvoke(messages)
        except TimeoutError as e:
            logger.warning(
                "Advisory call timed out",
                model=self.model,
                timeout_seconds=self.timeout_seconds,
            )
            raise ExternalServiceError(
                f"Advisory service timed out after {self.timeout_seconds}s",
                service=SERVICE_NAME,
                model=self.model,
            ) from e
        except Exception as e:
            logger.warning(
                "Advisory call failed",
                model=self.model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ExternalServiceError(
                "Advisory service request failed",
                service=SERVICE_NAME,
                model=self.model,
                original_error=type(e).__name__,
            ) from e

        content = response.content
        if not isinstance(content, str) or not content.strip():
            raise ExternalServiceError(
                "Advisory service returned empty content",
                service=SERVICE_NAME,
                model=self.model,
            )

        return content.strip()


def create_advisory_client(settings: Settings) -> AdvisoryClient | None:
    """Build the advisory client, or None when no API key is configured."""
    if not settings.advisory_enabled:
        logger.info("Advisory service not configured - rule-based signals only")
        return None
    return AdvisoryClient(settings)
