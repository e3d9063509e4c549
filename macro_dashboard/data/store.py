"""JSON file store for series data and sync metadata.

Layout inside the data directory::

    <key>.json          daily observations, ascending
    <key>_monthly.json  raw monthly observations backing an interpolated key
    metadata.json       freshness record for every series
    backup/<stamp>/     copies made before a full refetch
"""

import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pandas as pd

from macro_dashboard.models import Metadata, Observation


logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"


class SeriesStore:
    """File-backed storage for dashboard series."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def metadata_path(self) -> Path:
        return self.data_dir / METADATA_FILE

    def series_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _write_json(self, path: Path, payload) -> None:
        """Write via a temp file so readers never see a half-written file."""
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_json(self, path: Path):
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def load_series(self, key: str) -> list[Observation]:
        """Stored observations for a key, empty if the file does not exist."""
        path = self.series_path(key)
        if not path.exists():
            return []
        return [Observation.from_dict(item) for item in self._read_json(path)]

    def save_series(self, key: str, observations: list[Observation]) -> int:
        """
        Replace the stored series for a key.

        Returns:
            Number of observations written
        """
        self._write_json(self.series_path(key), [o.to_dict() for o in observations])
        return len(observations)

    def load_raw(self, key: str) -> list[Observation]:
        """Raw monthly observations backing an interpolated key."""
        return self.load_series(f"{key}_monthly")

    def save_raw(self, key: str, observations: list[Observation]) -> int:
        return self.save_series(f"{key}_monthly", observations)

    def load_metadata(self) -> Metadata | None:
        """Metadata record, or None before the first backfill."""
        if not self.metadata_path.exists():
            return None
        return Metadata.from_dict(self._read_json(self.metadata_path))

    def save_metadata(self, metadata: Metadata) -> None:
        self._write_json(self.metadata_path, metadata.to_dict())

    def get_frame(self, key: str) -> pd.DataFrame:
        """
        Stored series as a DataFrame.

        Returns:
            DataFrame with DatetimeIndex and 'value' column
        """
        observations = self.load_series(key)
        if not observations:
            return pd.DataFrame(columns=["value"])

        df = pd.DataFrame([o.to_dict() for o in observations])
        df["date"] = pd.to_datetime(df["date"])
        df.set_index("date", inplace=True)
        return df

    def backup(self) -> Path | None:
        """
        Copy every JSON file into ``backup/<timestamp>/``.

        Returns:
            The backup directory, or None when there was nothing to copy
        """
        json_files = sorted(self.data_dir.glob("*.json"))
        if not json_files:
            logger.info("No existing data to back up")
            return None

        stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        backup_dir = self.data_dir / "backup" / stamp
        backup_dir.mkdir(parents=True, exist_ok=True)

        for path in json_files:
            shutil.copy2(path, backup_dir / path.name)

        logger.info(f"Backed up {len(json_files)} files to {backup_dir}")
        return backup_dir
