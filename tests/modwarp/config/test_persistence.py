# tests/modwarp/config/test_persistence.py
import dataclasses
import json
import logging

import pytest
from pydantic import BaseModel, Field

from modwarp.config.persistence import defaultConfig, loadOrCreateConfig, persistConfig, readConfig
from modwarp.core.errors import ConfigError


class WarpSettings(BaseModel):
    speed: int = Field(default=5)
    label: str = "warp"
    tags: list[str] = Field(default_factory=list)


@dataclasses.dataclass
class PlainSettings:
    enabled: bool = True
    ratio: float = 0.5


class NeedsToken(BaseModel):
    token: str


def test_defaultConfig_appliesFieldDefaults():
    assert defaultConfig(WarpSettings) == WarpSettings(speed=5, label="warp", tags=[])
    assert defaultConfig(PlainSettings) == PlainSettings(enabled=True, ratio=0.5)


def test_defaultConfig_withoutDefaults_raises():
    with pytest.raises(ConfigError, match="NeedsToken"):
        defaultConfig(NeedsToken)


def test_persistConfig_writesIndentedJsonAtomically(tmp_path):
    path = tmp_path / "nested" / "config.json"

    persistConfig(WarpSettings, WarpSettings(speed=9, tags=["a"]), path)

    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"speed": 9, "label": "warp", "tags": ["a"]}
    assert '\n  "speed": 9' in text
    assert text.endswith("\n")
    assert list(path.parent.iterdir()) == [path]


def test_persistConfig_withoutParents_fails(tmp_path):
    with pytest.raises(OSError):
        persistConfig(WarpSettings, WarpSettings(), tmp_path / "missing" / "config.json", createParents=False)


def test_readConfig_acceptsJson5(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{ speed: 7, // fast\n label: 'hyper', }", encoding="utf-8")

    assert readConfig(WarpSettings, path) == WarpSettings(speed=7, label="hyper")


def test_readConfig_dataclass(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"enabled": false}', encoding="utf-8")

    assert readConfig(PlainSettings, path) == PlainSettings(enabled=False, ratio=0.5)


def test_readConfig_nonObject_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(TypeError):
        readConfig(WarpSettings, path)


def test_loadOrCreate_missingFile_persistsDefaults(tmp_path):
    path = tmp_path / "config" / "config.json"

    instance = loadOrCreateConfig(WarpSettings, path, label="test")

    assert instance == WarpSettings()
    assert json.loads(path.read_text(encoding="utf-8")) == {"speed": 5, "label": "warp", "tags": []}


def test_loadOrCreate_existingFile_isNormalized(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{speed: 11, unknown: true}", encoding="utf-8")

    instance = loadOrCreateConfig(WarpSettings, path, label="test")

    assert instance.speed == 11
    assert json.loads(path.read_text(encoding="utf-8")) == {"speed": 11, "label": "warp", "tags": []}


@pytest.mark.parametrize("garbage", [b"\x00\xff\xfe garbage", b"{ speed: 'fast' }", b"42"])
def test_loadOrCreate_corruptFile_selfHeals(tmp_path, caplog, garbage):
    path = tmp_path / "config.json"
    path.write_bytes(garbage)

    with caplog.at_level(logging.ERROR):
        first = loadOrCreateConfig(WarpSettings, path, label="test")
    healed = path.read_text(encoding="utf-8")
    second = loadOrCreateConfig(WarpSettings, path, label="test")

    assert first == WarpSettings()
    assert second == first
    assert path.read_text(encoding="utf-8") == healed
    assert any("failed" in rec.getMessage() for rec in caplog.records if rec.levelno == logging.ERROR)


def test_loadOrCreate_persistFailure_isNotFatal(tmp_path, caplog):
    path = tmp_path / "missing" / "config.json"

    with caplog.at_level(logging.ERROR):
        instance = loadOrCreateConfig(WarpSettings, path, label="test", createParents=False)

    assert instance == WarpSettings()
    assert not path.exists()
    assert any("Saving test config" in rec.getMessage() for rec in caplog.records)
