"""JSON Schema definitions for Deck Planner."""

from pathlib import Path

SCHEMA_DIR = Path(__file__).parent


def get_template_schema_path() -> Path:
    """Return the path to the template.schema.json file."""
    return SCHEMA_DIR / "template.schema.json"
