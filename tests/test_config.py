import pytest

from reqwest import Config

ENV_VARS = list(Config.ENV_MAPPINGS) + ["REQWEST_CONFIG"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_from_shipped_file():
    config = Config()

    assert config.session["timeout"] == 30.0
    assert config.session["follow_redirects"] is True
    assert config.logging["level"] == "INFO"


def test_env_overrides_are_typed(monkeypatch):
    monkeypatch.setenv("REQWEST_TIMEOUT", "2.5")
    monkeypatch.setenv("REQWEST_MAX_REDIRECTS", "0")
    monkeypatch.setenv("REQWEST_FOLLOW_REDIRECTS", "false")
    monkeypatch.setenv("REQWEST_USER_AGENT", "my-agent/2")

    config = Config()

    assert config.get("session", "timeout") == 2.5
    assert config.get("session", "max_redirects") == 0
    assert config.get("session", "follow_redirects") is False
    assert config.get("session", "user_agent") == "my-agent/2"


def test_custom_file_and_missing_sections(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("session:\n  timeout: 3\n")
    monkeypatch.setenv("REQWEST_LOG_LEVEL", "DEBUG")

    config = Config(str(path))

    assert config.session == {"timeout": 3}
    assert config.logging == {"level": "DEBUG"}
    assert config.get("session", "user_agent", default="fallback") == "fallback"


def test_config_path_from_env(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("logging:\n  format: console\n")
    monkeypatch.setenv("REQWEST_CONFIG", str(path))

    assert Config().logging["format"] == "console"


def test_empty_file_gives_empty_sections(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    config = Config(str(path))

    assert config.session == {}
    assert config.logging == {}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("session: [unclosed\n")

    with pytest.raises(ValueError):
        Config(str(path))


def test_dotenv_only_loaded_when_asked(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("REQWEST_TIMEOUT=7\n")
    monkeypatch.chdir(tmp_path)

    assert Config().session["timeout"] == 30.0

    config = Config(dotenv_path=str(env_file))
    assert config.session["timeout"] == 7
