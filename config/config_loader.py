"""
Configuration File Loader Utility

Loads the optional site configuration file in YAML or JSON, detecting the
format from the file extension or, failing that, from the content.
"""

import os
import json
import yaml
import logging
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file with automatic format detection.

    Args:
        file_path: Path to the configuration file

    Returns:
        Dict containing the loaded configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, unparsable, or not a mapping
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    file_extension = Path(file_path).suffix.lower()

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        if file_extension == '.json':
            data = json.loads(content)
        elif file_extension in ['.yaml', '.yml']:
            data = yaml.safe_load(content)
        else:
            # Try JSON first, then YAML
            try:
                data = json.loads(content)
            except json.JSONDecodeError:
                try:
                    data = yaml.safe_load(content)
                except yaml.YAMLError:
                    raise ValueError(f"Unsupported configuration file format: {file_path}")

        if data is None:
            raise ValueError("Configuration file is empty")
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {file_path}")
        return data

    except Exception as e:
        logger.error(f"Failed to load configuration file {file_path}: {e}")
        raise
