from movies_api.shared.config.env import load_env, env
from movies_api.shared.config.settings import Settings, get_settings, load_settings

__all__ = ["load_env", "env", "Settings", "get_settings", "load_settings"]
