import pytest

from essay_annotator.config import load_config, AnnotatorConfig
from essay_annotator.errors import ConfigError
from essay_annotator.stats import reading_minutes, word_count


def test_defaults_read_api_key_from_env(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
    config = load_config()
    assert config.api_key == "from-env"
    assert config.min_essay_chars == 50


def test_yaml_overrides(tmp_path, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    path = tmp_path / "annotator.yml"
    path.write_text("model: claude-test\nmax_retries: '5'\ntemperature: 0\napi_key: file-key\n")
    config = load_config(str(path))
    assert config == AnnotatorConfig(api_key="file-key", model="claude-test", max_retries=5, temperature=0.0)


@pytest.mark.parametrize("body", ["colour: blue\n", "max_retries: many\n", "- a\n- b\n", "model: [unclosed\n"])
def test_bad_config(tmp_path, body):
    path = tmp_path / "bad.yml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yml"))


def test_word_count_and_reading_time():
    assert word_count("") == 0
    assert word_count("  one\ntwo   three ") == 3
    assert reading_minutes("") == 1
    assert reading_minutes("word " * 181) == 2
    assert reading_minutes("word " * 100, words_per_minute=50) == 2


@pytest.mark.parametrize("body", [
    "max_tokens: 2.7\n",
    "max_retries: true\n",
    "api_key: 123\n",
    "model: null\n",
    "temperature: yes\n",
])
def test_config_values_not_coerced_silently(tmp_path, body):
    path = tmp_path / "annotator.yml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_whole_float_accepted_for_int_field(tmp_path, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    path = tmp_path / "annotator.yml"
    path.write_text("max_tokens: 4096.0\nmin_request_interval: 1\n")
    config = load_config(str(path))
    assert config.max_tokens == 4096 and isinstance(config.max_tokens, int)
    assert config.min_request_interval == 1.0
