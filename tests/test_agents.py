import json
from types import SimpleNamespace

import pytest

from estately.schemas import AgentMatchingInput
from estately.services.agents import AgentMatcher, AgentMatchingError, build_prompt, parse_recommendations

AGENT = {"name": "Jane Doe", "specialization": "Luxury homes", "experienceYears": 12,
         "contactInfo": "jane@example.com", "whyRecommended": "Knows the area."}


class StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def stub_client(**kw):
    completions = StubCompletions(**kw)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_prompt_includes_requirements_only_when_given():
    data = AgentMatchingInput(location="San Francisco, CA", propertyType="Condo", budget="$800,000")
    assert "Unique Requirements" not in build_prompt(data, 3)
    data.unique_requirements = "near a good school"
    prompt = build_prompt(data, 3)
    assert "Unique Requirements: near a good school" in prompt
    assert "up to 3 highly suitable" in prompt


def test_parse_caps_agents_and_strips_fences():
    raw = "```json\n" + json.dumps({"recommendedAgents": [AGENT] * 5}) + "\n```"
    out = parse_recommendations(raw, 3)
    assert len(out.recommended_agents) == 3
    assert out.recommended_agents[0].experience_years == 12


def test_parse_rejects_garbage():
    with pytest.raises(AgentMatchingError):
        parse_recommendations("not json", 3)
    with pytest.raises(AgentMatchingError):
        parse_recommendations(json.dumps({"recommendedAgents": [{"name": "x"}]}), 3)


async def test_recommend_uses_json_mode():
    client, completions = stub_client(content=json.dumps({"recommendedAgents": [AGENT]}))
    matcher = AgentMatcher(client=client, model="test-model")
    out = await matcher.recommend(AgentMatchingInput(location="Multan", propertyType="House", budget="1 crore"))
    assert out.recommended_agents[0].name == "Jane Doe"
    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["response_format"] == {"type": "json_object"}


async def test_recommend_wraps_api_errors():
    client, _ = stub_client(error=RuntimeError("boom"))
    with pytest.raises(AgentMatchingError):
        await AgentMatcher(client=client).recommend(
            AgentMatchingInput(location="Multan", propertyType="House", budget="1 crore"))
