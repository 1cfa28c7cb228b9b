"""Provider configuration files."""
from .loader import load_provider_config, find_config, ConfigFileError, UNKNOWN_MARKER

__all__ = ["load_provider_config", "find_config", "ConfigFileError", "UNKNOWN_MARKER"]
