"""Manifest — normalisation des configs + utilitaires."""
from .normalizer import normalize_config, normalize_widget_config, parse_field, try_normalize
from .utils import (
    load_config_file,
    validate_config,
    import_blocks_from_directory,
    sanitize_block_name,
    generate_template,
    clone_block,
    export_to_json,
    attributes_to_data_string,
    generate_documentation,
)

__all__ = [
    "normalize_config",
    "normalize_widget_config",
    "parse_field",
    "try_normalize",
    "load_config_file",
    "validate_config",
    "import_blocks_from_directory",
    "sanitize_block_name",
    "generate_template",
    "clone_block",
    "export_to_json",
    "attributes_to_data_string",
    "generate_documentation",
]
