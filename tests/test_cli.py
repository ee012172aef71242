"""
Tests for i18n_sync.cli module.

Tests the command-line interface.
"""

import json

import pytest

from i18n_sync.cli import _find_command, create_parser, main
from i18n_sync.io import get_backup_path, load_language_set


@pytest.fixture
def credentials_env(clean_credentials_env, monkeypatch):
    """Provide credentials and a config with no pacing delay."""
    monkeypatch.setenv("GOOGLE_TRANSLATE_PROJECT_ID", "test-project")
    monkeypatch.setenv("GOOGLE_TRANSLATE_KEY", "test-key")
    (clean_credentials_env / "i18n_sync.toml").write_text(
        "[translate]\napi_delay = 0\n", encoding="utf-8"
    )
    return clean_credentials_env


@pytest.fixture
def fake_google(monkeypatch, fake_service):
    """Replace the Google service with a fake; returns the fake instance."""
    monkeypatch.setattr(
        "i18n_sync.cli.GoogleTranslateService", lambda credentials: fake_service
    )
    return fake_service


@pytest.fixture
def original_text(sample_source):
    """The sample file contents before any command ran."""
    return sample_source.read_text(encoding="utf-8")


class TestParser:
    """Tests for argument parsing."""

    def test_help_flag(self, capsys):
        """Test that --help flag works."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])

        assert exc_info.value.code == 0
        assert "i18n-sync" in capsys.readouterr().out

    def test_version_flag(self, capsys):
        """Test that --version flag works."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "i18n-sync 1.0.0" in capsys.readouterr().out

    def test_no_command_prints_usage(self, capsys):
        """Test that no command prints help and succeeds."""
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "translate" in out
        assert "test" in out

    def test_unknown_command_prints_usage(self, capsys):
        """Test that an unknown command prints help and succeeds."""
        assert main(["frobnicate"]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_translate_options(self):
        args = create_parser().parse_args([
            "-v", "translate", "--file", "app.ts", "-l", "es", "--lang", "fr", "--dry-run",
        ])
        assert args.verbose
        assert args.file == "app.ts"
        assert args.languages == ["es", "fr"]
        assert args.dry_run

    def test_test_options(self):
        args = create_parser().parse_args(["test", "--format", "json", "--base", "de"])
        assert args.format == "json"
        assert args.base == "de"

    def test_find_command_skips_option_values(self):
        assert _find_command(["--config", "test", "translate"]) == "translate"
        assert _find_command(["-q", "test"]) == "test"
        assert _find_command(["-q"]) is None


class TestTestCommand:
    """Tests for the test subcommand."""

    def test_sample_is_healthy(self, sample_source, clean_credentials_env, capsys):
        """Test a self-check over a valid file without credentials."""
        assert main(["test", "--file", str(sample_source)]) == 0

        out = capsys.readouterr().out
        assert "Successfully parsed 3 languages" in out
        assert "- es: 2 missing keys" in out
        assert "All checks passed" in out

    def test_json_output(self, sample_source, clean_credentials_env, capsys):
        assert main(["test", "--file", str(sample_source), "--format", "json"]) == 0

        out = capsys.readouterr().out
        data = json.loads(out.split("\n", 1)[1])
        assert data["healthy"] is True

    def test_missing_file_is_unhealthy(self, clean_credentials_env):
        assert main(["test", "--file", "nope.ts"]) == 1

    def test_does_not_modify_file(self, sample_source, original_text, clean_credentials_env):
        main(["test", "--file", str(sample_source)])
        assert sample_source.read_text(encoding="utf-8") == original_text
        assert not get_backup_path(sample_source).exists()


class TestTranslateCommand:
    """Tests for the translate subcommand."""

    def test_translates_and_saves(
        self, sample_source, original_text, credentials_env, fake_google, capsys
    ):
        """Test a full run: backup, translate, write back."""
        assert main(["translate", "--file", str(sample_source)]) == 0

        backup = get_backup_path(sample_source)
        assert backup.read_text(encoding="utf-8") == original_text

        language_set = load_language_set(sample_source)
        assert language_set["es"]["nav"] == {"home": "Inicio", "settings": "es:Settings"}
        assert language_set["es"]["farewell"] == "es:Goodbye"
        assert language_set["fr"]["farewell"] == "Au revoir"
        assert "export default createI18n" in sample_source.read_text(encoding="utf-8")

        out = capsys.readouterr().out
        assert "Spanish (Español): Added 2 translations" in out
        assert "updated successfully" in out

    def test_failed_translations_get_placeholders(
        self, sample_source, credentials_env, monkeypatch, make_service
    ):
        service = make_service(failures={("Goodbye", "es"): 100})
        monkeypatch.setattr("i18n_sync.cli.GoogleTranslateService", lambda credentials: service)

        assert main(["translate", "--file", str(sample_source)]) == 0
        assert load_language_set(sample_source)["es"]["farewell"] == "[ES] Goodbye"

    def test_dry_run(self, sample_source, original_text, clean_credentials_env, capsys):
        """Test that a dry run needs no credentials and changes nothing."""
        report_path = clean_credentials_env / "report.json"
        code = main([
            "translate", "--file", str(sample_source), "--dry-run", "--report", str(report_path),
        ])

        assert code == 0
        assert sample_source.read_text(encoding="utf-8") == original_text
        assert not get_backup_path(sample_source).exists()
        assert '- farewell: "Goodbye"' in capsys.readouterr().out
        assert json.loads(report_path.read_text(encoding="utf-8"))["dry_run"] is True

    def test_nothing_missing(self, sample_source, credentials_env, fake_google, capsys):
        """Test that a complete language needs no backup or write."""
        assert main(["translate", "--file", str(sample_source), "--lang", "fr"]) == 0

        assert "No missing translations found" in capsys.readouterr().out
        assert not get_backup_path(sample_source).exists()
        assert fake_google.calls == []

    def test_missing_credentials(self, sample_source, clean_credentials_env):
        assert main(["translate", "--file", str(sample_source)]) == 4
        assert not get_backup_path(sample_source).exists()

    def test_missing_declaration(self, clean_credentials_env):
        source = clean_credentials_env / "i18n.ts"
        source.write_text("export default {};\n", encoding="utf-8")

        assert main(["translate", "--file", str(source), "--dry-run"]) == 3
        assert not get_backup_path(source).exists()

    def test_missing_source_file(self, clean_credentials_env):
        assert main(["translate", "--file", "nope.ts", "--dry-run"]) == 2

    def test_bad_config(self, sample_source, clean_credentials_env):
        (clean_credentials_env / "i18n_sync.toml").write_text(
            "[translate]\napi_delay = -5\n", encoding="utf-8"
        )
        assert main(["translate", "--file", str(sample_source), "--dry-run"]) == 2

    def test_languages_beyond_builtin_codes_are_synced(self, credentials_env, fake_google):
        """Test that every language in the file is processed without --lang."""
        source = credentials_env / "i18n.ts"
        source.write_text(
            "const translations = {\n"
            "  en: { a: { b: 'Hello', c: 'World' } },\n"
            "  xx: { a: { b: 'Hallo' } },\n"
            "};\n",
            encoding="utf-8",
        )

        assert main(["translate", "--file", str(source)]) == 0

        assert load_language_set(source)["xx"] == {"a": {"b": "Hallo", "c": "[XX] World"}}
        assert fake_google.calls == []

    def test_configured_target_languages_filter(
        self, sample_source, credentials_env, fake_google
    ):
        """Test that target_languages in the config limits the run."""
        (credentials_env / "i18n_sync.toml").write_text(
            '[translate]\napi_delay = 0\ntarget_languages = ["fr"]\n', encoding="utf-8"
        )

        assert main(["translate", "--file", str(sample_source)]) == 0
        assert not get_backup_path(sample_source).exists()
        assert fake_google.calls == []

    def test_report_written_when_nothing_missing(
        self, sample_source, credentials_env, fake_google
    ):
        """Test that --report is honoured on a run with nothing to do."""
        report_path = credentials_env / "report.json"
        code = main([
            "translate", "--file", str(sample_source), "--lang", "fr", "--report", str(report_path),
        ])

        assert code == 0
        data = json.loads(report_path.read_text(encoding="utf-8"))
        assert data["summary"] == {"missing": 0, "added": 0, "fallbacks": 0}
        assert data["languages"] == []

    def test_non_service_exception_still_saves(
        self, sample_source, credentials_env, monkeypatch
    ):
        """Test that an unexpected service exception degrades to placeholders."""

        class BrokenService:
            def translate(self, text, source_language, target_code):
                raise RuntimeError("socket closed")

        monkeypatch.setattr(
            "i18n_sync.cli.GoogleTranslateService", lambda credentials: BrokenService()
        )

        assert main(["translate", "--file", str(sample_source)]) == 0
        assert load_language_set(sample_source)["es"]["farewell"] == "[ES] Goodbye"
