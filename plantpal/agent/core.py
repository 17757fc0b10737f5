import asyncio
import logging
from typing import Callable

from google.genai import types
from pydantic_ai.providers.google import GoogleProvider

from plantpal import config
from plantpal.agent.deps import SymptomRequest
from plantpal.agent.models import DiagnosisReport
from plantpal.agent.parser import parse_report
from plantpal.agent.prompt import RequestEnvelope, build_from_request
from plantpal.errors import TransportError

logger = logging.getLogger(__name__)


def make_client(api_key: str = None, base_url: str = None):
    """Authenticated google-genai client."""
    provider = GoogleProvider(api_key=api_key or config.get_api_key(), base_url=base_url or config.get_base_url())
    return provider.client


class GeminiDiagnoser:
    """
    Sends one diagnosis request to Gemini and parses the reply.
    Each call is a single attempt: no retries, failures go back to the caller.

    Only settings are kept between attempts. A client is built per attempt
    and used through its blocking API on a worker thread, so nothing is
    bound to the event loop of a previous asyncio.run().
    """

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        timeout: float = None,
        client_factory: Callable = None,
    ):
        if client_factory is None:
            api_key = api_key or config.get_api_key()
            base_url = config.get_base_url()
            client_factory = lambda: make_client(api_key, base_url)  # noqa: E731
        self.client_factory = client_factory
        self.model = model or config.MODEL_NAME
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout

    def _generate(self, envelope: RequestEnvelope) -> str:
        client = self.client_factory()
        generation_config = envelope.config.model_copy(
            update={"http_options": types.HttpOptions(timeout=int(self.timeout * 1000))}
        )
        response = client.models.generate_content(
            model=envelope.model,
            contents=envelope.contents(),
            config=generation_config,
        )
        return response.text or ""

    async def send(self, envelope: RequestEnvelope) -> str:
        """Run the generate_content call and return the raw reply text."""
        logger.info(
            "Requesting diagnosis from %s (image attached: %s)", envelope.model, envelope.has_image
        )
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._generate, envelope), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Model did not answer within {self.timeout:.0f}s") from e
        except Exception as e:
            raise TransportError(f"Error calling Gemini API: {e}") from e

    async def diagnose(self, request: SymptomRequest) -> DiagnosisReport:
        envelope = build_from_request(request, model=self.model)
        raw_text = await self.send(envelope)
        return parse_report(raw_text)
