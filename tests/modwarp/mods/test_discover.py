# tests/modwarp/mods/test_discover.py
import logging
from pathlib import Path

import pytest

from modwarp.app.settings import ModLoaderSettings
from modwarp.core.errors import ModScanError
from modwarp.mods.discover import scanMods

from modhelpers import manifestPayload, writeManifest


def _skipReasons(result) -> dict[str, str]:
    return {skip.dirName: skip.reason for skip in result.skipped}


def test_scanMods_registersCandidatesInNameOrder(settings, makeMod):
    makeMod("charlie")
    makeMod("Alpha")
    makeMod("bravo")

    result = scanMods(settings)

    assert [candidate.dirName for candidate in result.candidates] == ["Alpha", "bravo", "charlie"]
    assert [candidate.modId for candidate in result.candidates] == ["Alpha", "bravo", "charlie"]
    assert result.candidates[0].modDir == settings.modsRoot / "Alpha"
    assert result.skipped == []


def test_scanMods_missingManifest_warnsAndSkips(settings, makeMod, caplog):
    makeMod("alpha")
    (settings.modsRoot / "loose").mkdir()

    with caplog.at_level(logging.WARNING):
        result = scanMods(settings)

    assert [candidate.dirName for candidate in result.candidates] == ["alpha"]
    assert _skipReasons(result) == {"loose": "missingManifest"}
    assert any("loose" in rec.getMessage() and rec.levelno == logging.WARNING for rec in caplog.records)


def test_scanMods_ignoreMarker_skipsRegardlessOfManifestValidity(settings, makeMod, caplog):
    makeMod("alpha", ignore=True)
    broken = settings.modsRoot / "broken"
    broken.mkdir()
    (broken / "modinfo.json").write_text("{ nope", encoding="utf-8")
    (broken / ".ignore").write_text("whatever", encoding="utf-8")

    with caplog.at_level(logging.INFO):
        result = scanMods(settings)

    assert result.candidates == []
    assert _skipReasons(result) == {"alpha": "ignored", "broken": "ignored"}
    assert not [rec for rec in caplog.records if rec.levelno >= logging.WARNING]


def test_scanMods_badManifest_doesNotAbortScan(settings, makeMod, caplog):
    makeMod("alpha")
    broken = settings.modsRoot / "broken"
    broken.mkdir()
    (broken / "modinfo.json").write_text("{ nope", encoding="utf-8")
    incomplete = settings.modsRoot / "incomplete"
    writeManifest(incomplete, {"mod_id": "incomplete"})
    makeMod("zulu")

    with caplog.at_level(logging.ERROR):
        result = scanMods(settings)

    assert [candidate.dirName for candidate in result.candidates] == ["alpha", "zulu"]
    assert _skipReasons(result) == {"broken": "invalidManifest", "incomplete": "invalidManifest"}
    assert any("broken" in rec.getMessage() for rec in caplog.records if rec.levelno == logging.ERROR)


def test_scanMods_duplicateModId_firstInScanOrderWins(settings, makeMod):
    makeMod("a-first", modId="shared")
    makeMod("b-second", modId="shared")

    result = scanMods(settings)

    assert [candidate.dirName for candidate in result.candidates] == ["a-first"]
    assert _skipReasons(result) == {"b-second": "duplicateId"}


def test_scanMods_filesInRootAreNotMods(settings, makeMod):
    makeMod("alpha")
    (settings.modsRoot / "space_warp_config.json").write_text("{}", encoding="utf-8")

    result = scanMods(settings)

    assert [candidate.dirName for candidate in result.candidates] == ["alpha"]


def test_scanMods_emptyRoot_warns(settings, caplog):
    with caplog.at_level(logging.WARNING):
        result = scanMods(settings)

    assert result.candidates == []
    assert any("No mods were found" in rec.getMessage() for rec in caplog.records)


def test_scanMods_unreadableRoot_isFatal(tmp_path: Path, caplog):
    settings = ModLoaderSettings(modsRoot=tmp_path / "does-not-exist")

    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(ModScanError) as excInfo:
            scanMods(settings)

    assert excInfo.value.root == settings.modsRoot
    assert any(rec.levelno == logging.CRITICAL for rec in caplog.records)


def test_scanMods_enforcedHostVersion_dropsUnsupportedMods(modsRoot: Path):
    writeManifest(modsRoot / "old", {**manifestPayload("old"), "ksp2_version": {"min": "0.1.0", "max": "0.1.2"}})
    writeManifest(modsRoot / "new", {**manifestPayload("new"), "ksp2_version": {"min": "0.1.0", "max": "*"}})

    advisory = scanMods(ModLoaderSettings(modsRoot=modsRoot, hostVersion="0.2.0"))
    enforced = scanMods(ModLoaderSettings(modsRoot=modsRoot, hostVersion="0.2.0", enforceHostVersion=True))

    assert [candidate.dirName for candidate in advisory.candidates] == ["new", "old"]
    assert [candidate.dirName for candidate in enforced.candidates] == ["new"]
    assert _skipReasons(enforced) == {"old": "unsupportedHostVersion"}
