"""
Filesystem locations used by the configuration layer.
"""

from importlib.resources import files

from platformdirs import user_config_path

APP_NAME = "novelsource"

# Environment variable naming a settings file; checked before the cwd.
CONFIG_ENV_VAR = "NOVELSOURCE_CONFIG"

USER_CONFIG_DIR = user_config_path(APP_NAME, appauthor=False)

# Searched for, in order, in the cwd and then in USER_CONFIG_DIR.
CONFIG_FILENAMES = ("settings.toml", "settings.json")

SAMPLE_CONFIG = files("novelsource.resources").joinpath(
    "config", "settings.sample.toml"
)
