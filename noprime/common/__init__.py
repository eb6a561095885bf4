# Common utilities
from .config_loader import (
    load_alternate_retailers,
    load_brand_aliases,
    load_brand_stores,
    load_config,
    load_disreputable_brands,
    load_settings,
)
from .log_config import setup_logging
from .text_utils import clean_text, encode_uri_component, truncate
