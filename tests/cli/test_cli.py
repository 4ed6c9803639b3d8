"""Tests for the lektor command line."""

import json

import pytest

import cli.helpers
from cli import create_parser, main
from cli.config.set import _parse_value
from cli.config.show import _mask_key
from infra.config import ConfigManager, reload_config
from infra.config.legacy import Config
from infra.storage import HistoryStore
from tutor.schemas import CorrectionEntry


@pytest.fixture
def storage_root(tmp_path, monkeypatch):
    monkeypatch.setattr("infra.config.runtime.Config", Config.model_copy(update={"storage_root": tmp_path}))
    reload_config()
    yield tmp_path
    monkeypatch.undo()
    reload_config()


@pytest.fixture
def fake_model(monkeypatch, tutor_model):
    monkeypatch.setattr(cli.helpers.TutorModel, "from_config", classmethod(lambda cls, name=None, logger=None: tutor_model))
    return tutor_model


class TestParser:
    def test_correct_arguments(self):
        args = create_parser().parse_args(['correct', '--no-save', '--json', 'Ich habe gegangen.'])
        assert args.text == 'Ich habe gegangen.'
        assert args.no_save and args.json
        assert args.collapsed is False

    def test_explain_reads_stdin_by_default(self):
        args = create_parser().parse_args(['explain', '--collapsed'])
        assert args.text is None
        assert args.collapsed is True

    def test_history_language_choices(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['history', 'list', '--language', 'fr'])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_capture_defaults_to_correction(self):
        args = create_parser().parse_args(['capture', '--lines'])
        assert args.mode == 'correction'
        assert args.lines is True


class TestValueParsing:
    @pytest.mark.parametrize('raw,expected', [
        ('true', True),
        ('False', False),
        ('15', 15),
        ('0.7', 0.7),
        ('["a", "b"]', ["a", "b"]),
        ('claude-sonnet', 'claude-sonnet'),
        ('{broken', '{broken'),
    ])
    def test_parse_value(self, raw, expected):
        assert _parse_value(raw) == expected

    def test_mask_key(self):
        assert _mask_key(None) == "(not set)"
        assert _mask_key("short") == "****"
        assert _mask_key("sk-or-v1-abcdef123456") == "sk-o...3456"


class TestConfigCommands:
    def test_init_then_set(self, storage_root, capsys):
        main(['init'])
        main(['config', 'set', 'defaults.history_page_size', '15'])

        config = ConfigManager(storage_root).load()
        assert config.defaults.history_page_size == 15
        assert "✓ Set defaults.history_page_size = 15" in capsys.readouterr().out

    def test_init_refuses_to_overwrite(self, storage_root, capsys):
        main(['init'])
        main(['init'])
        assert "Config already exists" in capsys.readouterr().out

    def test_set_without_config(self, storage_root, capsys):
        main(['config', 'set', 'defaults.llm_provider', 'claude-sonnet'])
        assert "No config found" in capsys.readouterr().out

    def test_set_rejects_invalid_value(self, storage_root, capsys):
        main(['init'])
        main(['config', 'set', 'defaults.history_page_size', '99'])

        assert "Failed to set" in capsys.readouterr().out
        assert ConfigManager(storage_root).load().defaults.history_page_size == 20

    def test_show_json_masks_keys(self, storage_root, capsys, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-v1-abcdef123456")
        main(['init'])
        capsys.readouterr()

        main(['config', 'show', '--json'])

        data = json.loads(capsys.readouterr().out)
        assert data['api_keys']['openrouter'] == "sk-o...3456"


class TestTutorCommands:
    def test_correct_json_without_saving(self, storage_root, fake_model, fake_client, make_correction, capsys):
        fake_client.queue(make_correction())

        main(['correct', '--json', '--no-save', 'I have went to the store yesterday.'])

        data = json.loads(capsys.readouterr().out)
        assert data['entry_id'] is None
        assert data['result']['corrected'] == 'I went to the store yesterday.'
        assert not (storage_root / 'history').exists()

    def test_explain_saves_to_history(self, storage_root, fake_model, fake_client, make_explanation, sentence, capsys):
        fake_client.queue(make_explanation())

        main(['explain', '--json', sentence])

        data = json.loads(capsys.readouterr().out)
        record = HistoryStore(storage_root).get(data['entry_id'])
        assert record['kind'] == 'explanation'

    def test_model_failure_exits_non_zero(self, storage_root, fake_model, fake_client, capsys):
        fake_client.queue("not json at all")

        with pytest.raises(SystemExit) as exc:
            main(['correct', 'Hallo'])

        assert exc.value.code == 1
        assert "✗" in capsys.readouterr().out


class TestHistoryCommands:
    @pytest.fixture
    def saved(self, storage_root):
        store = HistoryStore(storage_root)
        english = store.append(CorrectionEntry(original="I has a cat.", corrected="I have a cat.", language="en"))
        german = store.append(CorrectionEntry(original="Ich habe gegangen.", corrected="Ich bin gegangen.", language="de"))
        return english['id'], german['id']

    def test_list_json_filters_language(self, saved, capsys):
        main(['history', 'list', '--json', '--language', 'de'])

        data = json.loads(capsys.readouterr().out)
        assert [e['id'] for e in data['entries']] == [saved[1]]
        assert data['has_more'] is False

    def test_show_legacy_correction_gets_placeholders(self, saved, capsys):
        main(['history', 'show', saved[0]])
        assert "No analysis available" in capsys.readouterr().out

    def test_show_missing_entry(self, storage_root):
        with pytest.raises(SystemExit):
            main(['history', 'show', '0000000000000-deadbeef'])

    def test_delete(self, saved, storage_root, capsys):
        main(['history', 'delete', saved[0], '-y'])

        assert f"✓ Deleted {saved[0]}" in capsys.readouterr().out
        with pytest.raises(KeyError):
            HistoryStore(storage_root).get(saved[0])

    def test_list_skips_malformed_records(self, saved, storage_root, capsys):
        HistoryStore(storage_root).append({"kind": "correction", "original": "Bonjour", "language": "fr"})

        main(['history', 'list', '--json'])

        data = json.loads(capsys.readouterr().out)
        assert [e['id'] for e in data['entries']] == [saved[1], saved[0]]
