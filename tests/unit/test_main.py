"""Tests for the command line entry point."""
import json

from parafort import main as cli
from parafort.config import config
from parafort.verification import llm_clients
from parafort.verification.models import GeminiAnswer, OpenAIAnswer


class _OpenAI:
    def verify(self, state, entity_type):
        return OpenAIAnswer.model_validate({'state': state, 'formationFee': 300, 'annualReportRequired': False})


class _Gemini:
    def verify(self, state, entity_type):
        return GeminiAnswer.model_validate({'state': state, 'formationFee': '$300', 'annualReportRequired': 'No'})


def test_unknown_command_prints_usage(capsys):
    assert cli.main([]) == 2
    assert cli.main(['launch']) == 2
    assert 'verify-states' in capsys.readouterr().out


def test_option_values():
    args = ['--state=Texas', '--state=New York', '--output-dir=out']
    assert cli._option_values(args, 'state') == ['Texas', 'New York']
    assert cli._option_values(args, 'entity-type') == []


def test_verify_states_writes_outputs(monkeypatch, tmp_path):
    monkeypatch.setattr(llm_clients, 'OpenAIStateClient', _OpenAI)
    monkeypatch.setattr(llm_clients, 'GeminiStateClient', _Gemini)
    monkeypatch.setattr(config, 'VERIFICATION_DELAY_SECONDS', 0)

    code = cli.main(['verify-states', '--state=Texas', '--entity-type=LLC', f'--output-dir={tmp_path}'])

    assert code == 0
    report = json.loads((tmp_path / 'state-verification-report.json').read_text(encoding='utf-8'))
    assert report['summary']['validated'] == 1
    assert (tmp_path / 'stateFilingFees-verified.ts').exists()
