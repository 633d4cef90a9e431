"""Settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

VEHICLES_FILE = "vehicles.yaml"
RECORDS_FILE = "fuel_records.yaml"
MAINTENANCE_FILE = "maintenance.yaml"
PROBLEMS_FILE = "problems.yaml"


@dataclass
class Config:
    data_dir: Path
    user: Optional[str] = None
    log_level: str = "WARNING"
    secret_key: str = "dev-secret-key-change-in-prod"

    @property
    def vehicles_file(self) -> Path:
        return self.data_dir / VEHICLES_FILE

    @property
    def records_file(self) -> Path:
        return self.data_dir / RECORDS_FILE

    @property
    def maintenance_file(self) -> Path:
        return self.data_dir / MAINTENANCE_FILE

    @property
    def problems_file(self) -> Path:
        return self.data_dir / PROBLEMS_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build settings from environment variables:

        - FUELTRACK_DATA_DIR: directory holding the YAML stores (default ./data)
        - FUELTRACK_USER: user id for command line sessions
        - FUELTRACK_LOG_LEVEL: logging level name (default WARNING)
        - SECRET_KEY: Flask secret key
        """
        env = os.environ if environ is None else environ
        return cls(
            data_dir=Path(env.get("FUELTRACK_DATA_DIR", "data")),
            user=env.get("FUELTRACK_USER") or None,
            log_level=env.get("FUELTRACK_LOG_LEVEL", "WARNING").upper(),
            secret_key=env.get("SECRET_KEY", "dev-secret-key-change-in-prod"),
        )
