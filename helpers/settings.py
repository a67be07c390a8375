import configparser
import os

DEFAULTS = {
    'General': {
        'base': 'config',
        'prefix': 'is',
        'verbose': 'no',
    },
    'Hosts': {
        'loopback': '127.0.0.1',
    },
}


class SettingsError(Exception):
    pass


def load_settings(path=None, required=False):
    """
    Load the INI settings, falling back to built-in defaults.

    Parameters
    ----------
    path : str, optional
        Path to the settings file.
    required : bool
        Raise instead of using defaults when ``path`` does not exist.

    Returns
    -------
    config : configparser.ConfigParser
        Settings with every default section and key present.
    """

    config = configparser.ConfigParser(interpolation=None)
    config.read_dict(DEFAULTS)
    if path is None:
        return config
    if os.path.exists(path):
        try:
            config.read(path)
        except configparser.Error as e:
            raise SettingsError(f"Malformed settings file {path}: {e}") from e
    elif required:
        raise SettingsError(f"Settings file not found: {path}")
    return config
