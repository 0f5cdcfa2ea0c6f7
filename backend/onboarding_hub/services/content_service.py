"""Generated welcome content and project insight answers via OpenAI."""
import json
import logging
import re

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from onboarding_hub.config import settings
from onboarding_hub.schemas.content import GeneratedContent

logger = logging.getLogger(__name__)

WELCOME_SYSTEM_PROMPT = (
    "You are a senior consulting partner writing to a new client on behalf of "
    "our firm. Be warm, confident and specific to the engagement."
)

WELCOME_USER_PROMPT = """\
Based on the Statement of Work below, write a welcome message (2-3 paragraphs)
and 4-6 concrete next steps for onboarding the client.

Respond with JSON only, shaped exactly like:
{{"welcomeMessage": "...", "nextSteps": [{{"title": "...", "description": "..."}}]}}

SOW content:
{sow_text}
"""

INSIGHT_SYSTEM_PROMPT = (
    "You are a project analyst. Answer questions about the client project "
    "using only the data provided. Be concise and call out risks and delays.\n\n"
    "Project data:\n{project_data}"
)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class ContentGenerationError(Exception):
    pass


class AIServiceNotConfigured(Exception):
    pass


def _reformat_and_parse(raw: str) -> dict:
    """Single repair attempt: drop code fences, keep the outermost object, parse leniently."""
    text = _CODE_FENCE.sub("", raw.strip())
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise ContentGenerationError("Model response contains no JSON object")
    try:
        return json.loads(text[start:end + 1], strict=False)
    except json.JSONDecodeError as exc:
        raise ContentGenerationError("Failed to parse model response as valid JSON") from exc


def parse_generated_content(raw: str) -> GeneratedContent:
    try:
        data = json.loads(_CONTROL_CHARS.sub("", raw).strip())
    except json.JSONDecodeError as exc:
        logger.warning("JSON parsing failed, attempting to reformat: %s", exc)
        data = _reformat_and_parse(raw)

    try:
        return GeneratedContent.model_validate(data)
    except ValidationError as exc:
        raise ContentGenerationError("Invalid response structure from model") from exc


class ContentGenerator:
    def __init__(self, api_key: str | None = None, client: AsyncOpenAI | None = None):
        self._api_key = api_key or settings.openai_api_key
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self._api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise AIServiceNotConfigured("AI service not configured")
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=settings.http_timeout_seconds)
        return self._client

    async def generate_welcome_content(self, sow_text: str) -> GeneratedContent:
        try:
            completion = await self.client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": WELCOME_SYSTEM_PROMPT},
                    {"role": "user", "content": WELCOME_USER_PROMPT.format(sow_text=sow_text)},
                ],
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
            )
        except OpenAIError as exc:
            logger.error("Welcome content request failed: %s", exc)
            raise ContentGenerationError("Failed to generate welcome content. Please try again.") from exc

        raw = completion.choices[0].message.content if completion.choices else None
        if not raw:
            raise ContentGenerationError("No response from model")
        return parse_generated_content(raw)

    async def open_insight_stream(self, project_data: dict, user_query: str):
        """Start a streamed completion. Errors surface here, before any text is sent."""
        try:
            return await self.client.chat.completions.create(
                model=settings.insight_model,
                messages=[
                    {
                        "role": "system",
                        "content": INSIGHT_SYSTEM_PROMPT.format(project_data=json.dumps(project_data, indent=2)),
                    },
                    {"role": "user", "content": user_query},
                ],
                temperature=settings.openai_temperature,
                stream=True,
            )
        except OpenAIError as exc:
            logger.error("Project insight request failed: %s", exc)
            raise ContentGenerationError("Failed to start project insight stream") from exc
