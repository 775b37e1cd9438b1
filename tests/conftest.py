import logging
import sys
from pathlib import Path

import pytest

from modwarp.app.context import PROCESS_REGISTRY
from modwarp.app.globals import GLOBAL_CONFIG_KEY, MOD_CONFIG_STORE_KEY, MOD_MANAGER_KEY
from modwarp.app.settings import ModLoaderSettings

from modhelpers import entrySource, manifestPayload, writeManifest



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



# ----------------------------
# Fixtures
# ----------------------------

@pytest.fixture()
def modsRoot(tmp_path: Path) -> Path:
    root = tmp_path / "Mods"
    root.mkdir()
    return root



@pytest.fixture()
def settings(modsRoot: Path) -> ModLoaderSettings:
    return ModLoaderSettings(modsRoot=modsRoot)



@pytest.fixture()
def makeMod(modsRoot: Path):
    """
    makeMod("alpha", version="1.2.0", dependencies=[dep("beta", "1.0")], failIn="initialize")

    Writes <modsRoot>/<dirName>/modinfo.json and, unless code=None is passed
    explicitly, <modsRoot>/<dirName>/code/main.py with a recording Mod entry.
    """
    _default = object()

    def _make(
        dirName: str,
        *,
        modId: str | None = None,
        version: str = "1.0.0",
        dependencies: list[dict] | None = None,
        failIn: str | None = None,
        withConfig: bool = False,
        code: dict[str, str] | None | object = _default,
        ignore: bool = False,
    ) -> Path:
        modDir = modsRoot / dirName
        writeManifest(modDir, manifestPayload(modId or dirName, version=version, dependencies=dependencies))
        if ignore:
            (modDir / ".ignore").write_text("", encoding="utf-8")
        if code is _default:
            code = {"main.py": entrySource(failIn=failIn, withConfig=withConfig)}
        if code is not None:
            codeDir = modDir / "code"
            codeDir.mkdir(parents=True, exist_ok=True)
            for fileName, source in code.items():
                (codeDir / fileName).write_text(source, encoding="utf-8")
        return modDir

    return _make



@pytest.fixture(autouse=True)
def _isolateProcessState():
    root = logging.getLogger()
    rootLevel = root.level
    rootHandlers = list(root.handlers)
    yield
    # Drop handlers installed by configureLogging() during the test; pytest manages its own
    added = [handler for handler in root.handlers if handler not in rootHandlers]
    for handler in added:
        if type(handler).__module__.startswith("_pytest"):
            continue
        root.removeHandler(handler)
    root.setLevel(rootLevel)
    # ModManager.initializeGlobalConfig() leaves these at the configured level
    for name in ("modwarp", "mods"):
        logging.getLogger(name).setLevel(logging.NOTSET)
    for name in [name for name in sys.modules if name.startswith("modwarp_mods.")]:
        del sys.modules[name]
    for key in (GLOBAL_CONFIG_KEY, MOD_CONFIG_STORE_KEY, MOD_MANAGER_KEY):
        PROCESS_REGISTRY.unregister(key)
