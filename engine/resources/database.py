"""
Static data database.

Loads the JSON records a game ships with (type charts and the like),
validating each record against a JSON schema before accepting it.

Layout under the data root:
    schemas/<name>.schema.json
    database/<category>/*.json   (a single object or a list of objects)
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static game data.

    Records are keyed by their ``id`` field. Invalid or unreadable files
    are logged and skipped; one bad file never stops the rest loading.
    """

    # category folder -> schema file
    CATEGORIES: dict[str, str] = {
        "types": "type.schema.json",
    }

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        self.types: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load every known category from disk."""
        self._load_schemas()

        self.types = self._load_category("types", self.CATEGORIES["types"])

        self.logger.info(f"Loaded {len(self.types)} types from {self._data_path}.")

    def _load_schemas(self) -> None:
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> dict[str, Any]:
        """Load, validate and index all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        records: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return records

        schema = self._schemas.get(schema_name)
        if schema is None:
            self.logger.warning(f"No schema found for {folder} ({schema_name}), skipping")
            return records

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                try:
                    jsonschema.validate(instance=entry, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue

                if entry['id'] in records:
                    self.logger.warning(f"Duplicate {folder} id '{entry['id']}' in {file_path}, overriding")
                records[entry['id']] = entry

        return records

    def get_type(self, type_id: str) -> dict[str, Any] | None:
        return self.types.get(type_id)
