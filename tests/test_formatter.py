import json

import httpx
import pytest

from webform.formatter import format_structured_output, format_with_llm, parse_json_reply, summarize_with_llm
from webform.llm import LLMClient, LLMError
from webform.normalizer import normalize

SCHEMA = normalize(
    {
        "selectors": {"price": ".price", "title": ".t"},
        "structure": {"price": {"type": "number"}, "title": {"type": "string"}},
    }
)


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


def test_parse_json_reply_strips_fences():
    assert parse_json_reply('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_reply('```\n[1, 2]\n```') == [1, 2]
    assert parse_json_reply(' {"b": true} ') == {"b": True}


def test_structured_output_uses_llm_json():
    client = FakeClient(reply='```json\n{"price": 9.5, "title": "Lamp"}\n```')
    output = format_structured_output({"price": "9.50", "title": "Lamp", "_metadata": {}}, SCHEMA, client)
    assert output["price"] == 9.5
    assert output["_metadata"]["schemaVersion"] == "1.0"
    assert "TARGET SCHEMA" in client.prompts[0]
    assert "_metadata" not in client.prompts[0]


def test_structured_output_falls_back_on_bad_json():
    client = FakeClient(reply="Sure! Here is your data.")
    output = format_structured_output({"price": "abc", "title": "Lamp"}, SCHEMA, client)
    assert output["price"] == 0
    assert output["title"] == "Lamp"


def test_structured_output_falls_back_on_llm_error():
    client = FakeClient(error=LLMError("offline"))
    output = format_structured_output({"price": "12"}, SCHEMA, client, source="https://shop.example")
    assert output["price"] == 12
    assert output["_metadata"]["source"] == "https://shop.example"


def test_format_with_llm_flattens_values():
    client = FakeClient(reply="formatted")
    assert format_with_llm({"tags": ["a", "b"], "none": None, "_metadata": {}}, {"tags": ".tag"}, client) == "formatted"
    prompt = client.prompts[0]
    assert '"tags": "a,b"' in prompt
    assert '{"tags": ".tag"}' in prompt


def test_ollama_backend_posts_chat_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": {"content": "hello"}})

    client = LLMClient(backend="ollama", model="tiny", transport=httpx.MockTransport(handler))
    assert client.complete("hi") == "hello"
    assert seen["url"] == "http://localhost:11434/api/chat"
    assert seen["body"]["stream"] is False
    assert seen["body"]["messages"] == [{"role": "user", "content": "hi"}]


def test_backend_failures_raise_llm_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(LLMError):
        LLMClient(transport=httpx.MockTransport(handler)).complete("hi")
    with pytest.raises(LLMError):
        LLMClient(backend="carrier-pigeon").complete("hi")


def test_summarize_with_llm_sends_pretty_json():
    client = FakeClient(reply="A short summary.")
    assert summarize_with_llm({"title": "Lamp"}, client) == "A short summary."
    assert '"title": "Lamp"' in client.prompts[0]
