"""
Configuration loading
Built-in defaults, optionally overridden by a JSON file
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG: Dict[str, Any] = {
    "storage": {
        "directory": "data",
        "namespace": "recycling-wise-storage"
    },
    "history": {
        "capacity": 50
    },
    "impact": {
        "default_item_weight_kg": 0.1
    },
    "reports": {
        "directory": "logs",
        "enabled": True
    },
    "image": {
        "max_dimension": 512,
        "jpeg_quality": 85
    },
    "log_dir": "logs",
    "log_level": "INFO"
}


def merge_dicts(default: Dict, user: Dict) -> Dict:
    """Recursively overlay user values on defaults"""
    result = copy.deepcopy(default)
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file or use defaults"""
    if config_path and Path(config_path).exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            if not isinstance(user_config, dict):
                raise ValueError("top-level value must be an object")
            return merge_dicts(DEFAULT_CONFIG, user_config)
        except (OSError, ValueError) as e:
            print(f"Warning: Failed to load config {config_path}: {e}")
            print("Using default configuration")

    return copy.deepcopy(DEFAULT_CONFIG)
