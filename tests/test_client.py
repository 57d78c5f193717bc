"""Tests for PromptClient: as_type, as_bool, categorize."""

import json
import logging

import httpx
import openai
import pytest
from pydantic import BaseModel

from promptcast import (
    CategoryMismatchError,
    ClientSettings,
    ConfigurationError,
    ModelTier,
    PromptClient,
    RequestOptions,
    ResponseParseError,
    SchemaViolationError,
    UsageError,
)
from promptcast import descriptors as d


class PersonModel(BaseModel):
    name: str
    age: int


@pytest.fixture
def settings():
    return ClientSettings(api_key="sk-test", initial_delay=0)


@pytest.fixture
def make_client(settings, fake_openai, completion):
    """Build a PromptClient whose model answers with the given arguments payloads."""

    def _outcome(answer):
        if isinstance(answer, BaseException):
            return answer
        if isinstance(answer, str):
            return completion(answer)
        return completion(json.dumps(answer))

    def _make(*answers, **kwargs):
        fake = fake_openai(*[_outcome(a) for a in answers], **kwargs)
        return PromptClient(settings, client=fake), fake

    return _make


def _connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError):
            PromptClient(ClientSettings())

    def test_async_sdk_client(self):
        client = PromptClient(ClientSettings(api_key="sk-test"))
        assert isinstance(client._client, openai.AsyncOpenAI)
        assert client._client.max_retries == 0

    def test_sync_sdk_client(self):
        client = PromptClient(ClientSettings(api_key="sk-test", async_mode=False))
        assert isinstance(client._client, openai.OpenAI)

    def test_injected_client_needs_no_key(self, fake_openai, completion):
        PromptClient(client=fake_openai(completion('{"value": 1}')))


# ═══════════════════════════════════════════════════════════════════════════════
# as_type
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_as_type_number(make_client):
    client, fake = make_client({"value": 4})
    assert await client.as_type("what is 2+2", d.number()) == 4

    (sent,) = fake.calls
    params = sent["tools"][0]["function"]["parameters"]
    assert params["properties"] == {"value": {"type": "number"}}
    assert sent["messages"][1] == {"role": "user", "content": "what is 2+2"}
    assert sent["temperature"] == 0.0


@pytest.mark.asyncio
async def test_as_type_object_is_not_wrapped(make_client):
    client, fake = make_client({"name": "jose", "age": 42})
    person = d.object_of(name=d.string(), age=d.number())
    result = await client.as_type("hey i'm jose and i'm 42 years old", person)
    assert result == {"name": "jose", "age": 42}
    assert fake.calls[0]["tools"][0]["function"]["parameters"] == person.json_schema()


@pytest.mark.asyncio
async def test_as_type_array(make_client):
    client, _ = make_client({"value": ["red", "green"]})
    result = await client.as_type(
        "my favorite colors are red and green", d.array_of(d.string(), "favorite colors")
    )
    assert result == ["red", "green"]


@pytest.mark.asyncio
async def test_as_type_python_hints(make_client):
    client, _ = make_client({"name": "jose", "age": 42})
    person = await client.as_type("hey i'm jose and i'm 42 years old", PersonModel)
    assert isinstance(person, PersonModel)
    assert person.name == "jose"

    client, _ = make_client({"value": [1, 2, 3]})
    assert await client.as_type("count to three", list[int]) == [1, 2, 3]

    client, _ = make_client({"value": [{"name": "jose", "age": 42}, {"name": "ana", "age": 30}]})
    people = await client.as_type("jose is 42, ana is 30", list[PersonModel])
    assert all(isinstance(p, PersonModel) for p in people)
    assert people[1].age == 30


@pytest.mark.asyncio
async def test_as_type_empty_prompt_skips_model(make_client):
    client, fake = make_client({"value": "unused"})
    assert await client.as_type("", d.string()) == ""
    with pytest.raises(SchemaViolationError):
        await client.as_type("", d.number())
    with pytest.raises(SchemaViolationError):
        await client.as_type("", d.object_of(name=d.string()))
    assert fake.calls == []


@pytest.mark.asyncio
async def test_as_type_invalid_json_is_not_retried(make_client):
    client, fake = make_client('{"value": 4')
    with pytest.raises(ResponseParseError):
        await client.as_type("what is 2+2", d.number())
    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_as_type_schema_violation_is_not_retried(make_client):
    client, fake = make_client({"value": "four"})
    with pytest.raises(SchemaViolationError) as excinfo:
        await client.as_type("what is 2+2", d.number())
    assert excinfo.value.value == {"value": "four"}
    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_as_type_retries_transport_failures(make_client):
    client, fake = make_client(_connection_error(), _connection_error(), {"value": 4})
    assert await client.as_type("what is 2+2", d.number()) == 4
    assert len(fake.calls) == 3


@pytest.mark.asyncio
async def test_retry_warnings_use_module_logger(make_client, caplog):
    client, _ = make_client(_connection_error(), {"value": 4})
    with caplog.at_level(logging.WARNING, logger="promptcast.client"):
        assert await client.as_type("what is 2+2", d.number()) == 4
    names = {r.name for r in caplog.records if r.levelno == logging.WARNING}
    assert names == {"promptcast.client"}


@pytest.mark.asyncio
async def test_as_type_exhausted_retries_surface_sdk_error(make_client):
    err = _connection_error()
    client, fake = make_client(err)
    with pytest.raises(openai.APIConnectionError) as excinfo:
        await client.as_type("what is 2+2", d.number())
    assert excinfo.value is err
    assert len(fake.calls) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "options, model",
    [
        (None, "gpt-3.5-turbo"),
        (RequestOptions(use_higher_capability_model=True), "gpt-4"),
        (RequestOptions(tier=ModelTier.STANDARD, use_higher_capability_model=True), "gpt-3.5-turbo"),
    ],
)
async def test_model_tier_selection(make_client, options, model):
    client, fake = make_client({"value": 4})
    await client.as_type("what is 2+2", d.number(), options)
    assert fake.calls[0]["model"] == model


@pytest.mark.asyncio
async def test_sync_mode(fake_openai, completion):
    fake = fake_openai(completion('{"value": 4}'), sync=True)
    client = PromptClient(ClientSettings(api_key="sk-test", async_mode=False), client=fake)
    assert await client.as_type("what is 2+2", d.number()) == 4


# ═══════════════════════════════════════════════════════════════════════════════
# as_bool
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_as_bool(make_client):
    client, fake = make_client({"value": True}, {"value": False})
    assert await client.as_bool("the sky is blue") is True
    assert await client.as_bool("the sky is green") is False

    params = fake.calls[0]["tools"][0]["function"]["parameters"]
    assert params["properties"] == {"value": {"type": "boolean"}}
    assert "true or false" in fake.calls[0]["messages"][0]["content"]


@pytest.mark.asyncio
async def test_as_bool_empty_prompt(make_client):
    client, fake = make_client({"value": True})
    assert await client.as_bool("") is False
    assert fake.calls == []


@pytest.mark.asyncio
async def test_as_bool_rejects_non_boolean(make_client):
    client, fake = make_client({"value": "yes"})
    with pytest.raises(SchemaViolationError) as excinfo:
        await client.as_bool("is it raining?")
    err = excinfo.value
    assert err.value == {"value": "yes"}
    assert err.expected == fake.calls[0]["tools"][0]["function"]["parameters"]
    assert [fe["field"] for fe in err.field_errors] == ["value"]
    assert "boolean" in err.field_errors[0]["error"]


@pytest.mark.asyncio
async def test_as_bool_rejects_missing_answer(make_client):
    client, _ = make_client({"answer": True})
    with pytest.raises(SchemaViolationError) as excinfo:
        await client.as_bool("is it raining?")
    assert [fe["field"] for fe in excinfo.value.field_errors] == ["value"]


# ═══════════════════════════════════════════════════════════════════════════════
# categorize
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_categorize(make_client):
    client, fake = make_client({"value": "red"})
    assert await client.categorize("My favorite color is red", ["red", "blue", "green"]) == "red"
    params = fake.calls[0]["tools"][0]["function"]["parameters"]
    assert params["properties"]["value"] == {"type": "string", "enum": ["red", "blue", "green"]}


@pytest.mark.asyncio
async def test_categorize_out_of_set_does_not_raise(make_client, caplog):
    client, _ = make_client({"value": "purple"})
    with caplog.at_level(logging.WARNING, logger="promptcast.client"):
        result = await client.categorize("My favorite color is purple", ["red", "blue", "green"])
    assert result is None
    assert "purple" in caplog.text


@pytest.mark.asyncio
async def test_categorize_strict_raises(make_client):
    client, _ = make_client({"value": "purple"})
    with pytest.raises(CategoryMismatchError) as excinfo:
        await client.categorize("My favorite color is purple", ["red", "blue"], strict=True)
    assert excinfo.value.value == "purple"
    assert excinfo.value.allowed == ["red", "blue"]


@pytest.mark.asyncio
@pytest.mark.parametrize("labels", [[], (), "red"])
async def test_categorize_requires_labels(make_client, labels):
    client, fake = make_client({"value": "red"})
    with pytest.raises(UsageError):
        await client.categorize("My favorite color is red", labels)
    assert fake.calls == []


@pytest.mark.asyncio
async def test_categorize_empty_prompt(make_client):
    client, fake = make_client({"value": "red"})
    assert await client.categorize("", ["red", "blue"]) is None
    assert fake.calls == []


@pytest.mark.asyncio
async def test_categorize_propagates_parse_errors(make_client):
    client, _ = make_client("not json")
    with pytest.raises(ResponseParseError):
        await client.categorize("My favorite color is red", ["red"])
