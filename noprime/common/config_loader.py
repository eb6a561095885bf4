"""
Configuration Loader

Loads YAML configuration files for the brand catalog (stores, aliases,
alternate retailers, disreputable sellers) and runtime settings
(retailer URL patterns, toolbar icons and badges).
"""

import os
from pathlib import Path
from typing import Any, Dict, List

try:
    import yaml
except ImportError:
    yaml = None


def _get_config_dir() -> Path:
    """Get the config directory path."""
    override = os.environ.get("NOPRIME_CONFIG_DIR")
    if override:
        return Path(override)

    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def _construct_unique_mapping(loader, node, deep=False):
    """Build a mapping, rejecting keys that appear twice in the same block."""
    seen = set()
    for key_node, _ in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in seen:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                f"found duplicate key {key!r}", key_node.start_mark,
            )
        seen.add(key)
    return loader.construct_mapping(node, deep=deep)


def _unique_key_loader():
    """SafeLoader variant that fails on duplicate mapping keys."""
    class UniqueKeyLoader(yaml.SafeLoader):
        pass

    UniqueKeyLoader.add_constructor(
        yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
        _construct_unique_mapping,
    )
    return UniqueKeyLoader


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Duplicate keys within one mapping are an error rather than a silent
    overwrite, since catalog keys must be unique.

    Args:
        filename: Name of the config file (e.g., 'brands.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ImportError: If PyYAML is not installed
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If the file is malformed or repeats a key
    """
    if yaml is None:
        raise ImportError(
            "PyYAML is required for config loading. "
            "Install with: pip install pyyaml"
        )

    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.load(f, Loader=_unique_key_loader()) or {}


def load_brand_stores() -> Dict[str, Dict[str, Any]]:
    """
    Load the canonical brand -> store table, in file order.

    Returns:
        Dictionary mapping canonical brand key to its raw store record

    Example:
        {
            'adidas': {'url': 'https://www.adidas.com',
                       'search_template': 'https://www.adidas.com/us/search?q={query}'},
            'gopro': {'url': 'https://gopro.com', 'search_template': None},
            ...
        }
    """
    config = load_config('brands.yaml')
    return config.get('brands', {})


def load_brand_aliases() -> Dict[str, str]:
    """
    Load brand alias rules.

    Returns:
        Dictionary mapping a variant spelling to a canonical brand key

    Example:
        {
            'black & decker': 'black+decker',
            'hewlett-packard': 'hp',
            ...
        }
    """
    config = load_config('brand_aliases.yaml')
    return config.get('aliases', {})


def load_alternate_retailers() -> Dict[str, Dict[str, Any]]:
    """
    Load alternate retailers for brands without their own store.

    Returns:
        Dictionary mapping brand key to a retailer record with a 'store' name
    """
    config = load_config('alternate_retailers.yaml')
    return config.get('alternate_retailers', {})


def load_disreputable_brands() -> List[str]:
    """
    Load the list of seller names flagged as low-trust.

    Returns:
        List of brand names
    """
    config = load_config('disreputable_brands.yaml')
    return config.get('disreputable_brands', [])


def load_settings() -> Dict[str, Any]:
    """
    Load runtime settings.

    Returns:
        Dictionary with 'retailer' (name, URL patterns, product path pattern,
        excluded search term) and 'toolbar' (icons, titles, badges) sections.
    """
    return load_config('settings.yaml')
