"""
Tests for configuration loading and the compliance CLI.

Run with: pytest tests/test_config.py -v
"""

import json
import os
from unittest.mock import patch

import pytest

from affiliate_empire import cli
from affiliate_empire.config import Config, build_secrets_resolver, load_config
from affiliate_empire.secrets import AwsSecretsManagerStore, EnvSecretStore


YAML = """
openai:
  model: gpt-4o
aws:
  region: eu-west-1
compliance:
  extra_patterns:
    werbung: "\\\\bwerbung\\\\b"
"""


@pytest.fixture
def config_files(temp_dir):
    yaml_path = temp_dir / "config.yaml"
    yaml_path.write_text(YAML)
    env_path = temp_dir / ".env"
    env_path.write_text("AE_TEST_DOTENV_FLAG=yes\n")
    return yaml_path, env_path


# ============================================================
# Config
# ============================================================

class TestConfig:
    """Tests for layered configuration."""

    def test_yaml_flattened(self, config_files, monkeypatch):
        yaml_path, _ = config_files
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        config = load_config(env_file="does-not-exist.env", yaml_path=str(yaml_path))

        assert config.get("OPENAI_MODEL") == "gpt-4o"
        assert config.get("COMPLIANCE_EXTRA_PATTERNS_WERBUNG") == r"\bwerbung\b"
        assert config.get("MISSING", "fallback") == "fallback"

    def test_precedence(self, config_files, monkeypatch):
        yaml_path, _ = config_files
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4")

        config = load_config(env_file="does-not-exist.env", yaml_path=str(yaml_path))
        assert config.get("OPENAI_MODEL") == "gpt-4"

        config = load_config(
            env_file="does-not-exist.env",
            yaml_path=str(yaml_path),
            overrides={"OPENAI_MODEL": "gpt-4o-mini"},
        )
        assert config.get("OPENAI_MODEL") == "gpt-4o-mini"

    def test_values_without_env(self):
        config = Config(values={"OPENAI_MODEL": "gpt-4o"}, environ={})
        assert config.get("OPENAI_MODEL") == "gpt-4o"

    def test_dotenv_loaded(self, config_files):
        yaml_path, env_path = config_files
        try:
            config = load_config(env_file=str(env_path), yaml_path=str(yaml_path))
            assert config.get_bool("AE_TEST_DOTENV_FLAG")
        finally:
            os.environ.pop("AE_TEST_DOTENV_FLAG", None)

    def test_section(self, config_files):
        yaml_path, _ = config_files
        config = load_config(env_file="does-not-exist.env", yaml_path=str(yaml_path))
        assert config.section("compliance")["extra_patterns"] == {"werbung": r"\bwerbung\b"}
        assert config.section("nothing") == {}

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("YES", True), ("on", True),
        ("false", False), ("0", False), ("", False), (True, True),
    ])
    def test_get_bool(self, value, expected):
        assert Config(environ={}, overrides={"FLAG": value}).get_bool("FLAG") is expected

    def test_missing_files_give_empty_config(self, temp_dir):
        config = load_config(env_file=str(temp_dir / "none.env"), yaml_path=str(temp_dir / "none.yaml"))
        assert config.section("compliance") == {}


class TestSecretsResolverFactory:
    def test_env_store_by_default(self):
        resolver = build_secrets_resolver(Config(environ={}))
        assert isinstance(resolver.store, EnvSecretStore)

    def test_aws_store_when_enabled(self):
        config = Config(environ={}, overrides={
            "AWS_SECRETS_MANAGER_ENABLED": "true",
            "AWS_REGION": "eu-west-1",
            "SECRET_NAME_PREFIX": "empire",
        })
        with patch("affiliate_empire.secrets.stores.boto3") as boto3:
            resolver = build_secrets_resolver(config)

        assert isinstance(resolver.store, AwsSecretsManagerStore)
        assert resolver.store.prefix == "empire"
        boto3.client.assert_called_once_with("secretsmanager", region_name="eu-west-1")


# ============================================================
# CLI
# ============================================================

class TestCli:
    """Tests for the compliance command line."""

    @pytest.fixture(autouse=True)
    def quiet_logging(self):
        with patch("affiliate_empire.cli.configure_logging"):
            yield

    def run_cli(self, temp_dir, *argv):
        base = ["--config", str(temp_dir / "none.yaml"), "--env-file", str(temp_dir / "none.env")]
        return cli.main(base + list(argv))

    def test_check_compliant(self, temp_dir, capsys, sample_blog_post):
        post = temp_dir / "post.md"
        post.write_text(sample_blog_post, encoding="utf-8")

        code = self.run_cli(temp_dir, "check", str(post))
        output = json.loads(capsys.readouterr().out)

        assert code == cli.EXIT_OK
        assert output["validation"]["is_valid"] is True

    def test_check_social_non_compliant(self, temp_dir, capsys):
        caption = temp_dir / "caption.txt"
        caption.write_text("Loving this blender so much", encoding="utf-8")

        code = self.run_cli(temp_dir, "check", str(caption), "--type", "social", "--platform", "tiktok")
        output = json.loads(capsys.readouterr().out)

        assert code == cli.EXIT_NON_COMPLIANT
        assert "Missing FTC disclosure statement" in output["validation"]["issues"]

    def test_check_social_blog_platform_is_error(self, temp_dir, capsys):
        caption = temp_dir / "caption.txt"
        caption.write_text("#ad hello", encoding="utf-8")

        code = self.run_cli(temp_dir, "check", str(caption), "--type", "social", "--platform", "blog")
        assert code == cli.EXIT_ERROR

    def test_ensure_write(self, temp_dir, capsys, undisclosed_text):
        caption = temp_dir / "caption.txt"
        caption.write_text(undisclosed_text, encoding="utf-8")

        code = self.run_cli(temp_dir, "ensure", str(caption), "--platform", "tiktok", "--write")
        output = json.loads(capsys.readouterr().out)

        assert code == cli.EXIT_OK
        assert output["changed"] is True
        assert "#ad #affiliate" in caption.read_text(encoding="utf-8")

        self.run_cli(temp_dir, "ensure", str(caption), "--platform", "tiktok")
        assert json.loads(capsys.readouterr().out)["changed"] is False

    def test_report(self, temp_dir, capsys, sample_blog_post, undisclosed_text):
        content = temp_dir / "content"
        content.mkdir()
        (content / "a.md").write_text(sample_blog_post, encoding="utf-8")
        (content / "b.md").write_text(undisclosed_text, encoding="utf-8")
        (content / "image.png").write_bytes(b"\x89PNG")

        code = self.run_cli(temp_dir, "report", str(content))
        output = json.loads(capsys.readouterr().out)

        assert code == cli.EXIT_NON_COMPLIANT
        assert output["compliance_rate"] == 50.0
        assert output["issues"][0].endswith("b.md: Missing FTC disclosure statement, "
                                            "Content must include affiliate relationship disclosure")

    def test_report_missing_directory(self, temp_dir):
        assert self.run_cli(temp_dir, "report", str(temp_dir / "nope")) == cli.EXIT_ERROR

    def test_extra_patterns_from_config(self):
        config = Config(values={"__section__COMPLIANCE": {"extra_patterns": {"werbung": r"\bwerbung\b"}}}, environ={})
        validator = cli.build_validator(config)

        assert validator.rules[-1].name == "werbung"
        assert validator.validate_content("Werbung für diesen Mixer").has_disclosure

    def test_providers_all_mock(self, temp_dir, capsys, monkeypatch):
        for flag in ("OPENAI", "ANTHROPIC", "ELEVENLABS", "AMAZON", "YOUTUBE"):
            monkeypatch.setenv(f"{flag}_MOCK_MODE", "true")
        monkeypatch.delenv("AWS_SECRETS_MANAGER_ENABLED", raising=False)

        code = self.run_cli(temp_dir, "providers")
        output = json.loads(capsys.readouterr().out)

        assert code == cli.EXIT_OK
        assert set(output.values()) == {"mock"}
