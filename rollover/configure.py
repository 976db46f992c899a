from fncli import cli

from .config import DEFAULTS, Config, load_settings
from .core.errors import ConfigError


def setting_lines() -> list[str]:
    settings = load_settings()
    return [f"  {key}: {getattr(settings, key)}" for key in DEFAULTS]


def set_value(key: str, value: str) -> None:
    """Persist a setting, rejecting values the typed settings cannot read."""
    if key not in DEFAULTS:
        raise ConfigError(f"unknown setting '{key}', expected one of: {', '.join(DEFAULTS)}")
    config = Config()
    previous = config.get(key)
    config.set(key, value)
    try:
        load_settings(config)
    except ConfigError:
        if previous is None:
            config.unset(key)
        else:
            config.set(key, previous)
        raise


@cli("rollover config", name="ls", default=True)
def ls():
    """Show effective settings"""
    for line in setting_lines():
        print(line)


@cli("rollover config", name="set")
def set_(key: str, value: str):
    """Set a config value"""
    set_value(key, value)
    print(f"set: {key} = {value}")
