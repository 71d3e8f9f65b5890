"""
JSON Schema generator for the engine's boundary models.

This module generates JSON schemas for the snapshot input and the drawdown
result so the data and presentation layers can validate what they exchange
with the engine.
"""

import json
from pathlib import Path
from typing import Any, Dict

from .decumulation import WithdrawalResult
from .snapshot import FinancialSnapshot


def generate_snapshot_schema() -> Dict[str, Any]:
    """Generate JSON schema for the FinancialSnapshot model."""
    schema = FinancialSnapshot.model_json_schema()
    schema.update(
        {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "title": "Horizon Financial Snapshot",
            "description": "Balances and monthly cash flows fed to the projection engine",
        }
    )
    return schema


def generate_withdrawal_result_schema() -> Dict[str, Any]:
    """Generate JSON schema for the WithdrawalResult model."""
    schema = WithdrawalResult.model_json_schema()
    schema.update(
        {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "title": "Horizon Withdrawal Result",
            "description": "Year-by-year drawdown schedule for one withdrawal strategy",
        }
    )
    return schema


def save_schemas(output_dir: Path) -> None:
    """Save the boundary schemas as JSON files in output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    schemas = {
        "financial_snapshot.json": generate_snapshot_schema(),
        "withdrawal_result.json": generate_withdrawal_result_schema(),
    }
    for filename, schema in schemas.items():
        with open(output_dir / filename, "w") as f:
            json.dump(schema, f, indent=2)


if __name__ == "__main__":
    # Generate and save the schemas when run directly
    schema_dir = Path(__file__).parent.parent.parent / "schema"
    save_schemas(schema_dir)
    print(f"Schemas saved to {schema_dir}")
