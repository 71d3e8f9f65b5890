"""
Tests for JSON schema generation.
"""

import json

from horizon.models.schema_generator import (
    generate_snapshot_schema,
    generate_withdrawal_result_schema,
    save_schemas,
)


class TestSchemaGenerator:
    def test_snapshot_schema(self):
        schema = generate_snapshot_schema()

        assert schema["title"] == "Horizon Financial Snapshot"
        assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert "total_assets" in schema["properties"]
        assert "total_assets" in schema["required"]

    def test_withdrawal_result_schema(self):
        schema = generate_withdrawal_result_schema()

        assert schema["title"] == "Horizon Withdrawal Result"
        assert "schedule" in schema["properties"]

    def test_save_schemas(self, tmp_path):
        """Test that both schemas are written as JSON files."""
        output_dir = tmp_path / "schema"
        save_schemas(output_dir)

        with open(output_dir / "financial_snapshot.json") as f:
            assert json.load(f)["title"] == "Horizon Financial Snapshot"
        with open(output_dir / "withdrawal_result.json") as f:
            assert json.load(f)["title"] == "Horizon Withdrawal Result"
