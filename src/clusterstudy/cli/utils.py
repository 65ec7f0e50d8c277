"""Utility functions for the clusterstudy CLI."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from clusterstudy.utils.logging import setup_logger


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """Configure package logging for CLI use (stderr, so stdout stays clean)."""
    setup_logger(
        "clusterstudy",
        level=level,
        log_file=log_file,
        json_format=json_format,
        stream=sys.stderr,
    )


def save_result(data: Union[Dict[str, Any], List[Any]], output_path: Path) -> None:
    """Save a result to a YAML or JSON file, chosen by suffix."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        if output_path.suffix in ['.yaml', '.yml']:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        elif output_path.suffix == '.json':
            json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            raise ValueError(f"Unsupported output format: {output_path.suffix}")


def format_point(x: float, y: float, digits: int = 2) -> str:
    return f"({x:.{digits}f}, {y:.{digits}f})"
