"""Configuration loading for the dynamic logo generator."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class RenderConfig(BaseModel):
    size: int = 512
    animate: bool = True
    debug: bool = False


class StaticConfig(BaseModel):
    png: bool = False
    png_size: int = 512


class FontConfig(BaseModel):
    regular: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    bold: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"


class Config(BaseModel):
    input_path: str = "input.json"
    output_dir: str = "output"
    render: RenderConfig = Field(default_factory=RenderConfig)
    static: StaticConfig = Field(default_factory=StaticConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)

    @property
    def resolved_input_path(self) -> Path:
        """Plan JSON read by `generate`, `render` and `inspect`."""
        return _resolve(self.input_path)

    @property
    def resolved_output_dir(self) -> Path:
        """Where dated snapshots, `latest.svg` and the dial are written."""
        return _resolve(self.output_dir)


def _resolve(value: str) -> Path:
    p = Path(value).expanduser()
    if p.is_absolute():
        return p
    return _project_root() / p


def _project_root() -> Path:
    """Directory holding `config.yaml` and `input.json`; the package lives one level below."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Read `config.yaml` (or `config_path`) into a `Config`.

    A missing or empty file gives the defaults: `input.json` in, `output/` out,
    a 512px animated dial and no PNG preview.
    """
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        return Config(**raw)

    return Config()
