from sitecheck import config


def test_get_int_env_parses_value(monkeypatch):
    monkeypatch.setenv("CRAWL_THROTTLE", "12")
    assert config.get_int_env("CRAWL_THROTTLE", 5) == 12


def test_get_int_env_invalid_falls_back_to_default(monkeypatch, caplog):
    monkeypatch.setenv("CRAWL_THROTTLE", "lots")
    assert config.get_int_env("CRAWL_THROTTLE", 5) == 5
    assert "Invalid CRAWL_THROTTLE" in caplog.text


def test_get_int_env_empty_is_default(monkeypatch):
    monkeypatch.setenv("CRAWL_TIMEOUT", "")
    assert config.get_int_env("CRAWL_TIMEOUT", 20000) == 20000


def test_get_float_env(monkeypatch):
    monkeypatch.setenv("SOME_FLOAT", "0.5")
    assert config.get_float_env("SOME_FLOAT", 1.0) == 0.5
    monkeypatch.setenv("SOME_FLOAT", "nope")
    assert config.get_float_env("SOME_FLOAT", 1.0) == 1.0


def test_get_optional_str_env_blank_is_none(monkeypatch):
    monkeypatch.setenv("CRAWL_HOST", "   ")
    assert config.get_optional_str_env("CRAWL_HOST") is None
    monkeypatch.setenv("CRAWL_HOST", "staging.example.com")
    assert config.get_optional_str_env("CRAWL_HOST") == "staging.example.com"


def test_get_str_env_default(monkeypatch):
    monkeypatch.delenv("USER_AGENT", raising=False)
    assert config.get_str_env("USER_AGENT", "sitecheck/test") == "sitecheck/test"
