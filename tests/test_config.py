import json
from pathlib import Path

import pytest

from scenegen.config import (
    ENV_EXTENSION_API,
    SceneGenConfig,
    apply_overrides,
    build_config,
    find_project_config,
    load_config,
)
from scenegen.errors import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(ENV_EXTENSION_API, raising=False)


def test_defaults(tmp_path):
    config = build_config(tmp_path, tmp_path / "out")

    assert config.project_path == tmp_path.resolve()
    assert config.output_path == (tmp_path / "out").resolve()
    assert config.scene_extensions == ("tscn", "escn")
    assert config.ignore_marker == ".gdignore"
    assert config.extension_api is None
    assert config.include_builtin_actions
    assert config.clean_output
    assert not config.dump_models


def test_load_yaml_and_json(tmp_path):
    yaml_path = tmp_path / "scenegen.yaml"
    yaml_path.write_text("clean_output: false\nnative_classes:\n  - MyBase\n", encoding="utf-8")
    json_path = tmp_path / "other.json"
    json_path.write_text(json.dumps({"dump_models": True}), encoding="utf-8")

    assert load_config(yaml_path) == {"clean_output": False, "native_classes": ["MyBase"]}
    assert load_config(json_path) == {"dump_models": True}


def test_empty_yaml_is_empty_mapping(tmp_path):
    path = tmp_path / "scenegen.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == {}


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")

    toml_path = tmp_path / "scenegen.toml"
    toml_path.write_text("a = 1\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Unsupported config format"):
        load_config(toml_path)

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError, match="Could not parse"):
        load_config(broken)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(listing)


def test_project_config_is_discovered(tmp_path):
    assert find_project_config(tmp_path) is None
    (tmp_path / "scenegen.json").write_text('{"ignore_marker": ".skip"}', encoding="utf-8")

    assert find_project_config(tmp_path) == tmp_path / "scenegen.json"
    assert build_config(tmp_path, tmp_path / "out").ignore_marker == ".skip"


def test_precedence_file_then_env_then_overrides(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text(
        "extension_api: api/from_file.json\ndump_models: true\n", encoding="utf-8"
    )
    monkeypatch.setenv(ENV_EXTENSION_API, "api/from_env.json")

    config = build_config(
        tmp_path,
        tmp_path / "out",
        config_path=config_file,
        overrides={"dump_models": False},
    )

    assert config.extension_api == tmp_path.resolve() / "api/from_env.json"
    assert not config.dump_models


def test_absolute_extension_api_is_kept(tmp_path):
    api = tmp_path / "api.json"
    config = apply_overrides(
        SceneGenConfig(project_path=Path("/project"), output_path=Path("/out")),
        {"extension_api": str(api)},
    )

    assert config.extension_api == api


def test_overrides_are_validated(tmp_path):
    config = SceneGenConfig(project_path=tmp_path, output_path=tmp_path / "out")

    with pytest.raises(ConfigError, match="Unknown config keys: colour"):
        apply_overrides(config, {"colour": "blue"})
    with pytest.raises(ConfigError, match="must be a list of strings"):
        apply_overrides(config, {"scene_extensions": "tscn"})
    with pytest.raises(ConfigError, match="must be true or false"):
        apply_overrides(config, {"clean_output": "no"})

    updated = apply_overrides(config, {"scene_extensions": ["tscn"], "native_classes": ("Base",)})
    assert updated.scene_extensions == ("tscn",)
    assert updated.native_classes == ("Base",)
