"""Tests for the LLM provider clients (no network)."""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest

from parafort.verification import llm_clients
from parafort.verification.llm_clients import GeminiStateClient, OpenAIStateClient, extract_json


class TestExtractJson:

    def test_json_inside_prose(self):
        text = 'Here is the data:\n```json\n{"formationFee": "$300", "nested": {"a": 1}}\n```\nThanks!'
        assert extract_json(text) == {'formationFee': '$300', 'nested': {'a': 1}}

    @pytest.mark.parametrize("text", [None, '', 'no json here', '{not: valid}', '[1, 2]'])
    def test_unusable_text(self, text):
        assert extract_json(text) is None


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestOpenAIStateClient:

    def test_requests_json_mode(self):
        fake = MagicMock()
        fake.chat.completions.create.return_value = _completion(json.dumps({
            'state': 'Ohio', 'entityType': 'LLC', 'formationFee': 99, 'annualReportRequired': False,
        }))
        client = OpenAIStateClient(api_key='sk-test-1234567890', model='gpt-4o', client=fake)

        answer = client.verify('Ohio', 'LLC')

        assert answer.formation_fee == 99
        assert answer.annual_report_required is False
        kwargs = fake.chat.completions.create.call_args.kwargs
        assert kwargs['response_format'] == {'type': 'json_object'}
        assert kwargs['temperature'] == 0.1
        assert 'Ohio LLC' in kwargs['messages'][0]['content']

    def test_empty_content(self):
        fake = MagicMock()
        fake.chat.completions.create.return_value = _completion(None)
        assert OpenAIStateClient(api_key='sk-test-1234567890', client=fake).verify('Ohio', 'LLC') is None

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(llm_clients.config, 'OPENAI_API_KEY', None)
        with pytest.raises(ValueError):
            OpenAIStateClient()


class TestGeminiStateClient:

    def _respond(self, monkeypatch, body, status=200):
        calls = []

        def fake_post(url, **kwargs):
            calls.append((url, kwargs))
            return httpx.Response(status, json=body, request=httpx.Request('POST', url))

        monkeypatch.setattr(llm_clients.httpx, 'post', fake_post)
        return calls

    def test_parses_candidate_text(self, monkeypatch):
        text = 'Sure! {"formationFee": "$200", "annualReportRequired": "Yes", "officialSource": "SOS"}'
        calls = self._respond(monkeypatch, {'candidates': [{'content': {'parts': [{'text': text}]}}]})

        answer = GeminiStateClient(api_key='gem-test-123456', model='gemini-1.5-flash').verify('Utah', 'LLC')

        assert answer.formation_fee == 200
        assert answer.annual_report_required is True
        url, kwargs = calls[0]
        assert url.endswith('/models/gemini-1.5-flash:generateContent')
        assert kwargs['params'] == {'key': 'gem-test-123456'}
        assert kwargs['json']['generationConfig'] == {'temperature': 0.1}

    def test_no_candidates(self, monkeypatch):
        self._respond(monkeypatch, {'candidates': []})
        assert GeminiStateClient(api_key='gem-test-123456').verify('Utah', 'LLC') is None

    def test_http_error_propagates(self, monkeypatch):
        self._respond(monkeypatch, {'error': 'quota'}, status=429)
        with pytest.raises(httpx.HTTPStatusError):
            GeminiStateClient(api_key='gem-test-123456').verify('Utah', 'LLC')

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(llm_clients.config, 'GEMINI_API_KEY', None)
        with pytest.raises(ValueError):
            GeminiStateClient()
