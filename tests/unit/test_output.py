"""
Unit tests for CLI output formatting.
"""

import json

import yaml

from cli.output import OutputFormatter, flatten_dict
from validator.core import IssueSeverity, ValidationIssue, ValidationReport


class TestFlattenDict:
    """Test dot-path flattening."""

    def test_nested_sections(self):
        flat = flatten_dict({"ledger": {"api_url": "https://x", "timeout": 30}, "cli": {"output_format": "json"}})

        assert flat == {
            "ledger.api_url": "https://x",
            "ledger.timeout": 30,
            "cli.output_format": "json",
        }

    def test_empty_section_kept(self):
        assert flatten_dict({"validator": {}}) == {"validator": {}}


class TestOutputFormatter:
    """Test the three output formats."""

    def test_json(self):
        formatter = OutputFormatter('json')
        data = {"format": IssueSeverity.ERROR, "valid": True}

        assert json.loads(formatter.format(data)) == {"format": "error", "valid": True}

    def test_yaml(self):
        formatter = OutputFormatter('yaml')

        assert yaml.safe_load(formatter.format({"decimals": 6, "symbol": "USDC"})) == {
            "decimals": 6,
            "symbol": "USDC",
        }

    def test_key_value_table(self):
        output = OutputFormatter('table').format({"ledger": {"testnet": False}, "api_key": None})

        assert "ledger.testnet" in output
        assert "false" in output
        assert "null" in output

    def test_string_lists_inline(self):
        output = OutputFormatter('table').format({"validator": {"disabled_rules": ["a", "b"]}})
        assert "a, b" in output

    def test_list_table(self):
        output = OutputFormatter('table').format([
            {"symbol": "USDC", "decimals": 6},
            {"symbol": "ATOM", "decimals": 6},
        ])

        assert "symbol" in output
        assert "ATOM" in output

    def test_empty_data(self):
        formatter = OutputFormatter('table')

        assert formatter.format({}) == "No data available"
        assert formatter.format([]) == "No data available"

    def test_long_values_truncated(self):
        output = OutputFormatter('table', max_width=10).format({"uri": "x" * 50})
        assert "xxxxxxx..." in output


class TestReportFormatting:
    """Test validation report rendering."""

    def setup_method(self):
        self.report = ValidationReport(issues=[
            ValidationIssue(IssueSeverity.ERROR, "bad number", "messages[0].value.amount", "numeric_strings"),
            ValidationIssue(IssueSeverity.WARNING, "odd creator", "messages[0].value.creator", "message_fields"),
        ])

    def test_table(self):
        output = OutputFormatter('table').format_report(self.report)

        assert "messages[0].value.amount" in output
        assert "numeric_strings" in output
        assert output.endswith("INVALID: 1 error(s), 1 warning(s)")

    def test_table_without_issues(self):
        assert OutputFormatter('table').format_report(ValidationReport()) == "VALID: 0 error(s), 0 warning(s)"

    def test_json_wire_shape(self):
        data = json.loads(OutputFormatter('json').format_report(self.report))

        assert data["valid"] is False
        assert data["issues"][1] == {
            "severity": "warning",
            "message": "odd creator",
            "path": "messages[0].value.creator",
        }
