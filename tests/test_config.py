"""Tests for YAML config loading."""

from pathlib import Path

from autocall_logo.config import Config, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "config.yaml")
        assert config == Config()
        assert config.render.size == 512
        assert config.render.animate is True
        assert config.static.png is False

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "output_dir: /srv/logo\n"
            "render:\n  size: 1024\n  debug: true\n"
            "static:\n  png: true\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.render.size == 1024
        assert config.render.debug is True
        assert config.render.animate is True
        assert config.static.png is True
        assert config.resolved_output_dir == Path("/srv/logo")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == Config()

    def test_relative_paths_resolve_to_project_root(self):
        config = Config(input_path="data/plan.json")
        assert config.resolved_input_path.is_absolute()
        assert config.resolved_input_path.parts[-2:] == ("data", "plan.json")
