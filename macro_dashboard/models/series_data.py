"""Data models for stored series and sync state."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Observation:
    """Single dated value of a series."""

    date: date
    value: float

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Observation":
        return cls(date=date.fromisoformat(data["date"]), value=float(data["value"]))


@dataclass
class SeriesInfo:
    """Freshness record for one stored series."""

    latest_date: date
    record_count: int
    source_id: str

    @classmethod
    def for_series(cls, observations: list[Observation], source_id: str) -> "SeriesInfo":
        """Describe a non-empty stored series."""
        return cls(
            latest_date=observations[-1].date,
            record_count=len(observations),
            source_id=source_id,
        )

    def to_dict(self) -> dict:
        return {
            "latestDate": self.latest_date.isoformat(),
            "recordCount": self.record_count,
            "sourceId": self.source_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SeriesInfo":
        return cls(
            latest_date=date.fromisoformat(data["latestDate"]),
            record_count=int(data["recordCount"]),
            # older files used the FRED-specific field name
            source_id=data.get("sourceId", data.get("fredSeriesId", "")),
        )


@dataclass
class Metadata:
    """The single metadata record describing every stored series."""

    last_updated: date
    series_info: dict[str, SeriesInfo] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "lastUpdated": self.last_updated.isoformat(),
            "seriesInfo": {key: info.to_dict() for key, info in self.series_info.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Metadata":
        return cls(
            last_updated=date.fromisoformat(data["lastUpdated"][:10]),
            series_info={
                key: SeriesInfo.from_dict(info)
                for key, info in data.get("seriesInfo", {}).items()
            },
        )


@dataclass
class SyncResult:
    """Outcome of one synchronization run.

    ``new_records`` counts raw upstream points: for interpolated series that
    is the number of new monthly observations, not the daily rows produced.
    """

    updated: bool = False
    series_updated: list[str] = field(default_factory=list)
    new_records: int = 0

    def mark_updated(self, key: str, new_records: int) -> None:
        if key not in self.series_updated:
            self.series_updated.append(key)
        self.new_records += new_records
        self.updated = True

    def to_dict(self) -> dict:
        return {
            "updated": self.updated,
            "seriesUpdated": list(self.series_updated),
            "newRecords": self.new_records,
        }
