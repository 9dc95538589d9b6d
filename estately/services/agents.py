# estately/services/agents.py
"""
AI agent matching: turns a buyer's housing preferences into up to three
recommended real estate agents via one JSON-mode chat completion.
"""
import json
import logging
from typing import Any, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from estately.config import settings
from estately.schemas import AgentMatchingInput, AgentMatchingOutput

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are an expert real estate matchmaker. Always respond with valid JSON only."

PROMPT_TEMPLATE = """You are an AI assistant specialized in matching homebuyers with the best real estate agents. Your goal is to analyze the user's housing preferences and needs, and then recommend up to {max_agents} highly suitable real estate agents. For each recommended agent, provide their name, specialization, approximate years of experience, dummy contact information, and a clear explanation of why they are an optimal match for the given criteria.

User Housing Preferences and Needs:
Location: {location}
Property Type: {property_type}
Budget: {budget}
{requirements}
Based on these preferences, provide a list of recommended agents. Ensure the information is well-structured and relevant to the user's input.

Respond with a JSON object of this exact shape:
{{"recommendedAgents": [{{"name": str, "specialization": str, "experienceYears": number, "contactInfo": str, "whyRecommended": str}}]}}"""


class AgentMatchingError(Exception):
    pass


def build_prompt(data: AgentMatchingInput, max_agents: int) -> str:
    requirements = ""
    if data.unique_requirements:
        requirements = f"Unique Requirements: {data.unique_requirements}\n"
    return PROMPT_TEMPLATE.format(
        max_agents=max_agents,
        location=data.location,
        property_type=data.property_type,
        budget=data.budget,
        requirements=requirements,
    )


def _strip_code_fences(raw: str) -> str:
    lines = raw.strip().splitlines()
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_recommendations(raw: str, max_agents: int) -> AgentMatchingOutput:
    try:
        parsed = json.loads(_strip_code_fences(raw or ""))
        out = AgentMatchingOutput.model_validate(parsed)
    except (json.JSONDecodeError, ValidationError) as e:
        raise AgentMatchingError(f"unusable model output: {e}") from e
    out.recommended_agents = out.recommended_agents[:max_agents]
    return out


class AgentMatcher:
    def __init__(self, client: Optional[Any] = None, model: Optional[str] = None,
                 max_agents: Optional[int] = None):
        self._client = client
        self.model = model or settings.OPENAI_MODEL
        self.max_agents = max_agents or settings.MAX_RECOMMENDED_AGENTS

    @property
    def client(self):
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise AgentMatchingError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        return self._client

    async def recommend(self, data: AgentMatchingInput) -> AgentMatchingOutput:
        prompt = build_prompt(data, self.max_agents)
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
        except AgentMatchingError:
            raise
        except Exception as e:
            logger.exception("agent matching request failed")
            raise AgentMatchingError("Failed to find agents. Please try again later.") from e

        content = resp.choices[0].message.content if resp.choices else ""
        out = parse_recommendations(content, self.max_agents)
        logger.info("matched %d agents for %s", len(out.recommended_agents), data.location)
        return out
