"""Configuration utilities including hashing and diffing."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple

import yaml
from deepdiff import DeepDiff
from omegaconf import DictConfig, OmegaConf


# Keys to exclude from config hash (do not change results)
VOLATILE_KEYS = {
    "experiment.config_hash",
    "experiment.notes",
    "hydra",
    "logging",
}


def flatten_dict(
    d: Dict[str, Any],
    parent_key: str = "",
    sep: str = ".",
) -> Dict[str, Any]:
    """Flatten nested dictionary with dot-separated keys.

    Args:
        d: Dictionary to flatten
        parent_key: Parent key prefix
        sep: Separator for nested keys

    Returns:
        Flattened dictionary
    """
    items: List[Tuple[str, Any]] = []

    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k

        if isinstance(v, dict):
            items.extend(flatten_dict(v, new_key, sep).items())
        elif isinstance(v, (list, tuple)):
            items.append((new_key, str(v)))
        else:
            items.append((new_key, v))

    return dict(items)


def _to_dict(config: Dict[str, Any] | DictConfig) -> Dict[str, Any]:
    if isinstance(config, DictConfig):
        return OmegaConf.to_container(config, resolve=True)
    return config


def compute_config_hash(
    config: Dict[str, Any] | DictConfig,
    exclude_keys: Set[str] | None = None,
    hash_length: int = 8,
) -> str:
    """Compute deterministic hash of configuration.

    Args:
        config: Configuration dictionary or DictConfig
        exclude_keys: Additional keys to exclude from hash
        hash_length: Number of hash characters to return

    Returns:
        Truncated SHA256 hash of configuration
    """
    flat_config = flatten_dict(_to_dict(config))

    all_exclude = VOLATILE_KEYS.copy()
    if exclude_keys:
        all_exclude.update(exclude_keys)

    filtered_config = {
        k: v for k, v in flat_config.items()
        if not any(k == ex or k.startswith(ex + ".") for ex in all_exclude)
    }

    config_str = json.dumps(dict(sorted(filtered_config.items())), sort_keys=True, default=str)
    return hashlib.sha256(config_str.encode()).hexdigest()[:hash_length]


def get_config_diff(
    config1: Dict[str, Any] | DictConfig,
    config2: Dict[str, Any] | DictConfig,
    ignore_keys: Set[str] | None = None,
) -> Dict[str, Any]:
    """Get differences between two configurations.

    Args:
        config1: First configuration
        config2: Second configuration
        ignore_keys: Keys to ignore in comparison

    Returns:
        Dictionary with 'changed', 'added' and 'removed' entries where present
    """
    all_ignore = VOLATILE_KEYS.copy()
    if ignore_keys:
        all_ignore.update(ignore_keys)

    diff = DeepDiff(
        _to_dict(config1),
        _to_dict(config2),
        ignore_order=True,
        exclude_paths=[
            "root" + "".join(f"['{part}']" for part in key.split('.'))
            for key in all_ignore
        ],
        verbose_level=2,
    )

    result = {}

    if 'values_changed' in diff:
        result['changed'] = {
            k.replace("root", ""): {
                'old': v['old_value'],
                'new': v['new_value'],
            }
            for k, v in diff['values_changed'].items()
        }

    if 'dictionary_item_added' in diff:
        result['added'] = [k.replace("root", "") for k in diff['dictionary_item_added']]

    if 'dictionary_item_removed' in diff:
        result['removed'] = [k.replace("root", "") for k in diff['dictionary_item_removed']]

    return result


def validate_config_reproducibility(
    config: Dict[str, Any] | DictConfig,
) -> Tuple[bool, List[str]]:
    """Check that every random source in a configuration is seeded.

    Args:
        config: Configuration to validate

    Returns:
        Tuple of (is_reproducible, list_of_issues)
    """
    config = _to_dict(config)
    issues = []

    # Section seeds fall back to the global seed
    global_seed = config.get('seed')
    if global_seed is None:
        issues.append("No global seed specified")
    if config.get('kmeans', {}).get('seed', 0) is None and global_seed is None:
        issues.append("K-Means centroid sampling without seed")
    if config.get('playground', {}).get('seed', 0) is None and global_seed is None:
        issues.append("Playground centroid sampling without seed")

    return len(issues) == 0, issues


def save_config_with_hash(
    config: Dict[str, Any],
    output_dir: str | Path,
) -> str:
    """Save configuration with hash in filename.

    Args:
        config: Configuration to save
        output_dir: Directory to save to

    Returns:
        Path to saved configuration file
    """
    config_hash = compute_config_hash(config)
    config.setdefault('experiment', {})['config_hash'] = config_hash

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    config_file = output_dir / f"config_{config_hash}.yaml"
    with open(config_file, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return str(config_file)
