"""Provider configuration loaded from YAML.

```yaml
provider:
  host: 192.168.1.1
  username: root
  password: !unknown          # not resolvable yet
  insecure: true
```

Values may be marked unknown with the ``!unknown`` tag or the string
``(known after apply)``. Missing keys are null and fall back to environment
variables when the provider is configured.
"""
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from ..values import UNKNOWN

logger = logging.getLogger(__name__)

UNKNOWN_MARKER = "(known after apply)"


class ConfigFileError(Exception):
    """Error loading the provider configuration file."""
    pass


class _ProviderConfigLoader(yaml.SafeLoader):
    """SafeLoader that understands the ``!unknown`` tag."""


def _construct_unknown(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    return UNKNOWN


_ProviderConfigLoader.add_constructor("!unknown", _construct_unknown)


def find_config() -> str:
    """Find the provider config file."""
    env_path = os.environ.get("OPENWRT_PROVIDER_CONFIG")
    if env_path:
        return env_path

    search_paths = [
        Path.cwd() / "openwrt.yaml",
        Path.home() / ".config" / "openwrt-provider" / "openwrt.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return str(path)

    raise FileNotFoundError(
        "Could not find openwrt.yaml. Create one in the working directory "
        "or set OPENWRT_PROVIDER_CONFIG"
    )


def _resolve_markers(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == UNKNOWN_MARKER:
        return UNKNOWN
    if isinstance(value, dict):
        return {k: _resolve_markers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_markers(v) for v in value]
    return value


def load_provider_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """Load the raw ``provider`` block.

    Returns:
        Attribute name -> raw value (None, UNKNOWN or concrete)

    Raises:
        FileNotFoundError: If no config file can be found
        ConfigFileError: If the file is not valid YAML or has no provider block
    """
    path = config_path or find_config()
    logger.debug(f"Loading provider config from {path}")

    with open(path) as f:
        try:
            data = yaml.load(f, Loader=_ProviderConfigLoader)
        except yaml.YAMLError as e:
            raise ConfigFileError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"{path}: top level must be a mapping")

    provider = data.get("provider", {})
    if provider is None:
        provider = {}
    if not isinstance(provider, dict):
        raise ConfigFileError(f"{path}: 'provider' must be a mapping")

    return _resolve_markers(provider)
