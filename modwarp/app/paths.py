# modwarp/app/paths.py
from __future__ import annotations


# On-disk layout constants
MODS_FOLDER_NAME = "Mods"                             # <dataPath>/Mods
MANIFEST_FILE_NAME = "modinfo.json"
IGNORE_MARKER_NAME = ".ignore"
CODE_FOLDER_NAME = "code"                             # <modDir>/code/*.py
CONFIG_FOLDER_NAME = "config"                         # <modDir>/config/config.json
CONFIG_FILE_NAME = "config.json"
GLOBAL_CONFIG_FILE_NAME = "space_warp_config.json"    # <modsRoot>/space_warp_config.json
