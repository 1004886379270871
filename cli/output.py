#!/usr/bin/env python3
"""
Output Formatting Module for BitBadges Toolkit CLI

Renders command results as tables, JSON or YAML. Nested results such as
configuration sections or API responses are shown in tables as dot-path
keys, and validation reports get their own issue table and status line.
"""

import json
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from tabulate import tabulate

NO_DATA = "No data available"
ISSUE_COLUMNS = ['severity', 'rule', 'path', 'message']


def flatten_dict(data: Dict[str, Any], parent_key: str = '', sep: str = '.') -> Dict[str, Any]:
    """Flatten nested sections into dot-path keys (``ledger.api_url``)."""
    items = {}
    for key, value in data.items():
        new_key = f"{parent_key}{sep}{key}" if parent_key else str(key)
        if isinstance(value, dict) and value:
            items.update(flatten_dict(value, new_key, sep=sep))
        else:
            items[new_key] = value
    return items


class OutputFormatter:
    """Output formatter shared by every bbtk command."""

    def __init__(self, format_type: str = 'table',
                 color_output: bool = True,
                 max_width: Optional[int] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            color_output: Enable colored output when stdout is a terminal
            max_width: Longest value shown in key-value tables
        """
        self.format_type = format_type
        self.color_output = color_output and sys.stdout.isatty()
        self.max_width = max_width or 120

    def format(self, data: Any, headers: Optional[List[str]] = None) -> str:
        if self.format_type == 'json':
            return self.format_json(data)
        elif self.format_type == 'yaml':
            return self.format_yaml(data)
        return self.format_table(data, headers)

    def format_json(self, data: Any) -> str:
        return json.dumps(data, indent=2, default=self._json_encoder)

    def format_yaml(self, data: Any) -> str:
        # Enums, paths and models only survive safe_dump as plain JSON values
        plain = json.loads(self.format_json(data))
        return yaml.safe_dump(plain, default_flow_style=False, sort_keys=False).rstrip()

    def format_table(self, data: Any, headers: Optional[List[str]] = None) -> str:
        if isinstance(data, dict):
            return self._format_dict_table(data)
        elif isinstance(data, list):
            return self._format_list_table(data, headers)
        return str(data)

    def format_report(self, report) -> str:
        """
        Format a validation report.

        JSON and YAML output is the report's wire shape. Tables list one row
        per issue, coloured by severity, followed by a VALID/INVALID line.
        """
        if self.format_type in ('json', 'yaml'):
            return self.format(report.to_dict())

        lines = []
        if report.issues:
            rows = [
                [
                    self._colorize(issue.severity.value, issue.severity.value),
                    issue.rule or '',
                    issue.path or '',
                    issue.message,
                ]
                for issue in report.issues
            ]
            headers = [self._colorize(column, 'header') for column in ISSUE_COLUMNS]
            lines.append(tabulate(rows, headers=headers, tablefmt='grid'))

        status = "VALID" if report.valid else "INVALID"
        summary = f"{status}: {len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        lines.append(self._colorize(summary, 'success' if report.valid else 'error'))
        return '\n'.join(lines)

    def _format_dict_table(self, data: Dict[str, Any]) -> str:
        if not data:
            return NO_DATA

        table_data = [[self._colorize(key, 'key'), self._format_value(value, self.max_width)]
                      for key, value in flatten_dict(data).items()]
        return tabulate(table_data, tablefmt='plain')

    def _format_list_table(self, data: List[Any], headers: Optional[List[str]] = None) -> str:
        if not data:
            return NO_DATA

        if not isinstance(data[0], dict):
            return '\n'.join(str(item) for item in data)

        if headers is None:
            headers = list(data[0].keys())

        table_data = [[self._format_value(item.get(h, '')) for h in headers] for item in data]
        colored_headers = [self._colorize(h, 'header') for h in headers]
        return tabulate(table_data, headers=colored_headers, tablefmt='grid')

    def _format_value(self, value: Any, max_length: Optional[int] = None) -> str:
        if value is None:
            return self._colorize('null', 'null')
        elif isinstance(value, bool):
            return self._colorize('true' if value else 'false', 'bool')
        elif isinstance(value, (int, float)):
            return self._colorize(str(value), 'number')
        elif isinstance(value, Enum):
            return str(value.value)
        elif isinstance(value, dict):
            return f"<{len(value)} items>"
        elif isinstance(value, list):
            # Rule names, sources and similar short lists read best inline
            if all(isinstance(item, str) for item in value):
                value = ', '.join(value) if value else '[]'
            else:
                return f"[{len(value)} items]"

        val_str = str(value)
        if max_length and len(val_str) > max_length:
            val_str = val_str[:max_length - 3] + '...'
        return val_str

    def _colorize(self, text: str, color_type: str) -> str:
        if not self.color_output:
            return text

        colors = {
            'header': '\033[1;34m',   # Bold blue
            'key': '\033[1;36m',      # Bold cyan
            'number': '\033[33m',     # Yellow
            'bool': '\033[35m',       # Magenta
            'null': '\033[90m',       # Gray
            'error': '\033[1;31m',    # Bold red
            'warning': '\033[1;33m',  # Bold yellow
            'success': '\033[1;32m',  # Bold green
        }

        color = colors.get(color_type)
        return f"{color}{text}\033[0m" if color else text

    def _json_encoder(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, Path):
            return str(obj)
        elif hasattr(obj, 'model_dump'):
            return obj.model_dump()
        elif hasattr(obj, 'to_dict'):
            return obj.to_dict()
        return str(obj)


__all__ = [
    'OutputFormatter',
    'flatten_dict',
]
