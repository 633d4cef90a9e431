#!/usr/bin/env python3
"""Validate fuel tracker store files against the schema."""
import argparse
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

import fueltrack
from fueltrack.config import (
    Config,
    MAINTENANCE_FILE,
    PROBLEMS_FILE,
    RECORDS_FILE,
    VEHICLES_FILE,
)


def load_schema() -> dict:
    """Load the JSON schema shipped with the fueltrack package."""
    schema_path = Path(fueltrack.__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_store_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single store YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the store files found in the data directory."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "data_dir",
        type=Path,
        nargs="?",
        help="Directory holding the store files (default: $FUELTRACK_DATA_DIR)",
    )
    args = parser.parse_args(argv)

    data_dir = args.data_dir or Config.from_env().data_dir
    if not data_dir.exists():
        print(f"Error: data directory not found: {data_dir}")
        return 1

    store_files = [
        data_dir / name
        for name in (VEHICLES_FILE, RECORDS_FILE, MAINTENANCE_FILE, PROBLEMS_FILE)
        if (data_dir / name).exists()
    ]
    if not store_files:
        print(f"Warning: No store files found in {data_dir}")
        return 0

    schema = load_schema()
    all_valid = True
    for filepath in store_files:
        errors = validate_store_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
