"""Tests for CodeBuild buildspec generation."""
import yaml

from spa_hosting_kit.configs.config_loader import ConfigLoader
from spa_hosting_kit.pipeline.buildspec_generator import BuildSpecGenerator


def test_default_buildspec(minimal_doc):
    spec = BuildSpecGenerator.generate(ConfigLoader.apply_defaults(minimal_doc))

    assert spec.to_dict() == {
        "version": "0.2",
        "phases": {
            "install": {"runtime-versions": {"nodejs": "20"}, "commands": ["npm ci"]},
            "build": {"commands": ["npm run build"]},
        },
        "artifacts": {"files": ["**/*"], "base-directory": "dist"},
    }


def test_buildspec_follows_build_config(full_doc):
    cfg = ConfigLoader.apply_defaults(full_doc)

    spec = BuildSpecGenerator.generate(cfg)

    assert list(spec.install.commands) == [cfg.build.install_command]
    assert list(spec.build.commands) == [cfg.build.build_command]
    assert spec.artifacts.base_directory == cfg.build.output_directory
    assert spec.to_dict()["artifacts"]["base-directory"] == "build"


def test_generate_is_idempotent(full_doc):
    cfg = ConfigLoader.apply_defaults(full_doc)

    first = BuildSpecGenerator.generate(cfg)
    second = BuildSpecGenerator.generate(cfg)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert first is not second


def test_to_dict_returns_fresh_objects(minimal_doc):
    spec = BuildSpecGenerator.generate(ConfigLoader.apply_defaults(minimal_doc))

    rendered = spec.to_dict()
    rendered["phases"]["build"]["commands"].append("rm -rf /")

    assert spec.to_dict()["phases"]["build"]["commands"] == ["npm run build"]


def test_to_yaml_round_trips_to_the_same_document(minimal_doc):
    spec = BuildSpecGenerator.generate(ConfigLoader.apply_defaults(minimal_doc))

    text = spec.to_yaml()

    assert text.startswith("version: '0.2'")
    assert yaml.safe_load(text) == spec.to_dict()


def test_buildspec_is_hashable(minimal_doc):
    cfg = ConfigLoader.apply_defaults(minimal_doc)

    assert hash(BuildSpecGenerator.generate(cfg)) == hash(BuildSpecGenerator.generate(cfg))
