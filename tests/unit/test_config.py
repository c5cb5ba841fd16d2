"""Unit tests for configuration resolution"""

import pytest

from rotessa_client import (
    BASE_URLS,
    ClientConfig,
    ClientParameters,
    ConfigError,
    DEFAULT_TIMEOUT_MS,
    HttpxTransport,
    build_environment,
    load_client_config,
    load_env_file,
)


def test_defaults_when_only_key_is_given():
    config = load_client_config(api_key="abc", env_file=None, base={})

    assert config.api_key == "abc"
    assert config.base_url == BASE_URLS["production"]
    assert config.timeout_ms == DEFAULT_TIMEOUT_MS
    assert isinstance(config.transport, HttpxTransport)
    assert config.reporter is None


def test_explicit_arguments_win_over_environment():
    env = {
        "ROTESSA_API_KEY": "from-env",
        "ROTESSA_API_BASE_URL": "https://env.example/v1",
        "ROTESSA_TIMEOUT_MS": "5000",
    }

    config = load_client_config(
        env_file=None,
        base=env,
        api_key="explicit",
        base_url="https://explicit.example/v1/",
        timeout_ms=250,
    )

    assert config.api_key == "explicit"
    assert config.base_url == "https://explicit.example/v1"
    assert config.timeout_ms == 250


def test_environment_is_used_when_arguments_are_absent():
    env = {
        "ROTESSA_API_KEY": "from-env",
        "ROTESSA_API_BASE_URL": "https://env.example/v1",
        "ROTESSA_TIMEOUT_MS": "5000",
    }

    config = load_client_config(env_file=None, base=env)

    assert config.api_key == "from-env"
    assert config.base_url == "https://env.example/v1"
    assert config.timeout_ms == 5000


def test_process_environment_is_the_default_base(monkeypatch):
    monkeypatch.setenv("ROTESSA_API_KEY", "process-key")

    assert load_client_config(env_file=None).api_key == "process-key"


def test_missing_api_key_is_a_config_error():
    with pytest.raises(ConfigError, match="ROTESSA_API_KEY"):
        load_client_config(env_file=None, base={})


def test_empty_api_key_is_a_config_error():
    """An explicit empty key is not silently replaced by anything"""
    with pytest.raises(ConfigError):
        load_client_config(api_key="", env_file=None, base={})

    with pytest.raises(ConfigError):
        ClientConfig(api_key="   ")


@pytest.mark.parametrize("raw", ["abc", "0", "-20", ""])
def test_bad_environment_timeout_falls_back_to_default(raw):
    config = load_client_config(
        env_file=None, base={"ROTESSA_API_KEY": "k", "ROTESSA_TIMEOUT_MS": raw}
    )

    assert config.timeout_ms == DEFAULT_TIMEOUT_MS


@pytest.mark.parametrize("timeout_ms", [0, -1, "soon"])
def test_bad_explicit_timeout_is_a_config_error(timeout_ms):
    with pytest.raises(ConfigError, match="timeout_ms"):
        load_client_config(api_key="k", env_file=None, base={}, timeout_ms=timeout_ms)


def test_sandbox_environment_selects_sandbox_url():
    config = load_client_config(
        env_file=None, base={"ROTESSA_API_KEY": "k", "ROTESSA_ENVIRONMENT": "sandbox"}
    )

    assert config.base_url == BASE_URLS["sandbox"]


def test_explicit_environment_beats_base_url_from_env():
    config = load_client_config(
        env_file=None,
        base={"ROTESSA_API_KEY": "k", "ROTESSA_API_BASE_URL": "https://env.example/v1"},
        environment="sandbox",
    )

    assert config.base_url == BASE_URLS["sandbox"]


def test_unknown_environment_is_a_config_error():
    with pytest.raises(ConfigError, match="ROTESSA_ENVIRONMENT"):
        load_client_config(api_key="k", env_file=None, base={}, environment="staging")


def test_parameters_bundle_is_applied():
    parameters = ClientParameters(api_key="bundle", timeout_ms=42)

    config = load_client_config(env_file=None, base={}, parameters=parameters)

    assert config.api_key == "bundle"
    assert config.timeout_ms == 42


def test_env_file_values_fill_gaps_but_never_override(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# Rotessa sandbox\n"
        'ROTESSA_API_KEY="file-key"\n'
        "export ROTESSA_TIMEOUT_MS=3000\n"
        "not a setting\n",
        encoding="utf-8",
    )

    config = load_client_config(
        env_file=str(env_file), base={"ROTESSA_TIMEOUT_MS": "9000"}
    )

    assert config.api_key == "file-key"
    assert config.timeout_ms == 9000


def test_missing_env_file_is_ignored(tmp_path):
    environment = build_environment(
        env_file=str(tmp_path / "absent.env"), base={"A": "1"}, overrides={"B": "2"}
    )

    assert dict(environment.variables) == {"A": "1", "B": "2"}
    assert environment.get("C", "fallback") == "fallback"


def test_load_env_file_preserves_existing_keys(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ROTESSA_API_KEY=file\nROTESSA_ENVIRONMENT=sandbox\n", encoding="utf-8")
    environ = {"ROTESSA_API_KEY": "existing"}

    merged = load_env_file(str(env_file), environ=environ)

    assert merged == {"ROTESSA_API_KEY": "existing", "ROTESSA_ENVIRONMENT": "sandbox"}


def test_repr_never_shows_the_key():
    config = ClientConfig(api_key="super-secret")

    assert "super-secret" not in repr(config)
    assert config.authorization_header == 'Token token="super-secret"'
    assert config.timeout_seconds == DEFAULT_TIMEOUT_MS / 1000


def test_async_reporter_is_rejected():
    """Reporters run synchronously, so a coroutine function would never be awaited"""

    async def reporter(error):
        return None

    class AsyncReporter:
        async def __call__(self, error):
            return None

    with pytest.raises(ConfigError, match="reporter"):
        ClientConfig(api_key="k", reporter=reporter)
    with pytest.raises(ConfigError, match="reporter"):
        ClientConfig(api_key="k", reporter=AsyncReporter())


def test_plain_reporters_are_accepted():
    seen = []

    assert ClientConfig(api_key="k", reporter=seen.append).reporter == seen.append
    assert ClientConfig(api_key="k", reporter=print).reporter is print


def test_build_environment_leaves_base_untouched(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ROTESSA_API_KEY=file-key\nROTESSA_ENVIRONMENT=sandbox\n", encoding="utf-8")
    base = {"ROTESSA_ENVIRONMENT": "production"}

    environment = build_environment(env_file=str(env_file), base=base)

    assert base == {"ROTESSA_ENVIRONMENT": "production"}
    assert environment.get("ROTESSA_API_KEY") == "file-key"
    assert environment.get("ROTESSA_ENVIRONMENT") == "production"


def test_env_file_parsing_skips_malformed_lines(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "export ROTESSA_API_KEY='quoted key'\n=orphan\nno_equals\n  # comment\nROTESSA_TIMEOUT_MS = 2500 \n",
        encoding="utf-8",
    )

    assert load_env_file(str(env_file), environ={}) == {
        "ROTESSA_API_KEY": "quoted key",
        "ROTESSA_TIMEOUT_MS": "2500",
    }
