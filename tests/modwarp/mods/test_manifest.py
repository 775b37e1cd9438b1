# tests/modwarp/mods/test_manifest.py
from pathlib import Path

import pytest

from modwarp.core.errors import ManifestError
from modwarp.mods.manifest import DependencyConstraint, ModManifest, loadManifest, parseManifest

from modhelpers import dep, manifestPayload


def test_parseManifest_readsAllFields():
    payload = manifestPayload("alpha", version="1.2.3", dependencies=[dep("beta", "1.0.0", "2.0.0")])

    manifest = parseManifest(payload)

    assert manifest.mod_id == "alpha"
    assert manifest.name == "Alpha"
    assert manifest.version == "1.2.3"
    assert manifest.dependencies == (
        DependencyConstraint.model_validate(dep("beta", "1.0.0", "2.0.0")),
    )
    assert manifest.ksp2_version.min == "0.1.0"
    assert manifest.ksp2_version.max == "*"


def test_manifest_isImmutable():
    manifest = parseManifest(manifestPayload("alpha"))
    with pytest.raises(Exception):
        manifest.version = "9.9.9"


def test_parseManifest_missingRequiredField_raisesManifestError():
    payload = manifestPayload("alpha")
    del payload["version"]

    with pytest.raises(ManifestError):
        parseManifest(payload)


def test_parseManifest_coercesNumericVersionsAndNullDependencies():
    payload = manifestPayload("alpha")
    payload["version"] = 2
    payload["dependencies"] = None
    payload["ksp2_version"] = {"min": 0.1, "max": "*"}

    manifest = parseManifest(payload)

    assert manifest.version == "2"
    assert manifest.dependencies == ()
    assert manifest.ksp2_version.min == "0.1"


def test_dependencyConstraint_isSatisfiedBy_checksIdAndBounds():
    constraint = DependencyConstraint.model_validate(dep("beta", "1.0.0", "2.0.0"))

    assert constraint.isSatisfiedBy(parseManifest(manifestPayload("beta", version="1.2.0")))
    assert not constraint.isSatisfiedBy(parseManifest(manifestPayload("beta", version="2.0.1")))
    assert not constraint.isSatisfiedBy(parseManifest(manifestPayload("gamma", version="1.2.0")))


def test_supportsHostVersion_isAdvisoryRange():
    manifest = ModManifest.model_validate({**manifestPayload("alpha"), "ksp2_version": {"min": "0.1.0", "max": "0.1.5"}})

    assert manifest.supportsHostVersion(None)
    assert manifest.supportsHostVersion("0.1.2")
    assert not manifest.supportsHostVersion("0.2.0")


def test_loadManifest_malformedFile_raisesManifestError(tmp_path: Path):
    path = tmp_path / "modinfo.json"
    path.write_text("{ this is : not json", encoding="utf-8")

    with pytest.raises(ManifestError) as excInfo:
        loadManifest(path)
    assert excInfo.value.path == path


def test_loadManifest_nonObject_raisesManifestError(tmp_path: Path):
    path = tmp_path / "modinfo.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ManifestError):
        loadManifest(path)
