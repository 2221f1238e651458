"""
Settings and YAML configuration handling for FAIRe2MDT.

A conversion is driven by a single immutable ConversionSettings value. It can
be built from command line arguments, from a YAML configuration file, or both
(command line values win). After a successful run the effective settings are
saved next to the output workbook so the run can be reproduced with
--config_file.
"""

import os
from dataclasses import dataclass, asdict
from datetime import datetime

import yaml

from .errors import ConfigError

# Spreadsheet columns 22 and 23 of OceanOmics taxaFinal sheets hold ASV length
# diagnostics that are not part of the MDT taxonomy sheet.
DEFAULT_TAXA_DROP_COLUMNS = (22, 23)

# Keys recognised in a configuration file, mapped to ConversionSettings fields
CONFIG_KEYS = {
    'FAIReMetadata': 'faire_metadata',
    'assay_name': 'assay_name',
    'seq_run_id': 'seq_run_id',
    'output_dir': 'output_dir',
    'taxa_drop_columns': 'taxa_drop_columns',
    'filter_run_table': 'filter_run_table',
}

REQUIRED_SETTINGS = ('faire_metadata', 'assay_name', 'seq_run_id')


@dataclass(frozen=True)
class ConversionSettings:
    """Everything a single FAIRe to MDT conversion needs to know."""

    assay_name: str
    seq_run_id: str
    faire_metadata: str
    output_dir: str = '.'
    taxa_drop_columns: tuple = DEFAULT_TAXA_DROP_COLUMNS
    filter_run_table: bool = False
    save_config: bool = True

    @property
    def project_id(self):
        """Project identifier used in the output; always the sequencing run label."""
        return self.seq_run_id


def _as_column_positions(value):
    if value is None:
        return ()
    if isinstance(value, (int, str)):
        value = [value]
    positions = []
    for item in value:
        try:
            position = int(item)
        except (TypeError, ValueError):
            raise ConfigError(f"taxa_drop_columns must hold column numbers, got '{item}'")
        if position < 1:
            raise ConfigError(f"taxa_drop_columns are 1-based column numbers, got {position}")
        positions.append(position)
    return tuple(positions)


def _as_bool(value, key):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('y', 'yes', 'true', '1'):
        return True
    if isinstance(value, str) and value.strip().lower() in ('n', 'no', 'false', '0', ''):
        return False
    raise ConfigError(f"'{key}' must be true or false, got '{value}'")


def load_config(config_file_path):
    """
    Load configuration from YAML file.

    Args:
        config_file_path (str): Path to the configuration file

    Returns:
        dict: Configuration dictionary (empty if the file is empty)

    Raises:
        ConfigError: If the file does not exist, cannot be parsed or is not a mapping
    """
    if not os.path.exists(config_file_path):
        raise ConfigError(f"Configuration file not found: {config_file_path}")

    try:
        with open(config_file_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not load configuration file {config_file_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file {config_file_path} must contain a mapping of settings")

    print(f"Loaded configuration from: {config_file_path}")
    return config


def build_settings(config=None, **overrides):
    """
    Combine configuration file values and explicit overrides into settings.

    Overrides set to None are ignored, so unset command line options fall back
    to the configuration file and then to the defaults.

    Args:
        config (dict): Values loaded from a configuration file (optional)
        **overrides: ConversionSettings field values

    Returns:
        ConversionSettings: The immutable settings for this run
    """
    values = {}
    settings_block = (config or {}).get('settings', config or {})
    for key, field_name in CONFIG_KEYS.items():
        if key in settings_block and settings_block[key] is not None:
            values[field_name] = settings_block[key]
    values.update({k: v for k, v in overrides.items() if v is not None})

    missing = [name for name in REQUIRED_SETTINGS if not str(values.get(name, '')).strip()]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    if 'taxa_drop_columns' in values:
        values['taxa_drop_columns'] = _as_column_positions(values['taxa_drop_columns'])
    for flag in ('filter_run_table', 'save_config'):
        if flag in values:
            values[flag] = _as_bool(values[flag], flag)
    for name in ('assay_name', 'seq_run_id', 'faire_metadata', 'output_dir'):
        if name in values:
            values[name] = str(values[name]).strip()

    unknown = set(values) - set(ConversionSettings.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    return ConversionSettings(**values)


def get_config_file_path(output_file_path):
    """
    Generate configuration file path based on output file path.

    Args:
        output_file_path (str): Path to the output MDT workbook

    Returns:
        str: Path to the configuration file
    """
    base_path = os.path.splitext(output_file_path)[0]
    return f"{base_path}_config.yaml"


def new_run_record(settings, command=''):
    """Start the record of a run from its settings."""
    values = asdict(settings)
    values['taxa_drop_columns'] = list(settings.taxa_drop_columns)
    return {
        'command': command,
        'date_time': datetime.now().isoformat(),
        'settings': {key: values[field_name] for key, field_name in CONFIG_KEYS.items()},
        'generated_files': [],
    }


def add_generated_file(config, file_path, description):
    """
    Add a generated file to the configuration.

    Args:
        config (dict): Configuration dictionary
        file_path (str): Path to the generated file
        description (str): Description of what the file contains
    """
    if 'generated_files' not in config:
        config['generated_files'] = []

    if any(gf.get('file_path') == file_path for gf in config['generated_files']):
        return

    config['generated_files'].append({
        'file_path': file_path,
        'description': description,
        'timestamp': datetime.now().isoformat()
    })


def save_config(config, config_file_path):
    """
    Save the run record to a YAML file that can be reused with --config_file.

    A failure to save is reported as a warning; the converted workbook has
    already been written at this point.

    Args:
        config (dict): Configuration dictionary to save
        config_file_path (str): Path to save the configuration file

    Returns:
        bool: True if the file was written
    """
    try:
        config_dir = os.path.dirname(config_file_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_file_path, 'w', encoding='utf-8') as f:
            f.write("# =============================================================================\n")
            f.write("# FAIRe2MDT run configuration\n")
            f.write("# Reuse with: python FAIRe2MDT.py --config_file path/to/this/file.yaml\n")
            f.write("# =============================================================================\n\n")
            yaml.safe_dump(config, f, sort_keys=False, allow_unicode=True, default_flow_style=False)
        print(f"Configuration saved to: {config_file_path}")
        return True
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Could not save configuration file {config_file_path}: {e}")
        return False
