"""Tests for the JSON file store."""

import json
from datetime import date

from macro_dashboard.data.store import SeriesStore
from macro_dashboard.models import Metadata, Observation, SeriesInfo


SERIES = [Observation(date(2024, 1, 2), 4.01), Observation(date(2024, 1, 3), 4.02)]


class TestSeriesFiles:
    def test_missing_series_is_empty(self, store):
        assert store.load_series("treasury_10y") == []

    def test_series_file_layout(self, store):
        store.save_series("treasury_10y", SERIES)

        payload = json.loads((store.data_dir / "treasury_10y.json").read_text())
        assert payload == [
            {"date": "2024-01-02", "value": 4.01},
            {"date": "2024-01-03", "value": 4.02},
        ]
        assert store.load_series("treasury_10y") == SERIES

    def test_raw_series_file_name(self, store):
        store.save_raw("cpi", SERIES)
        assert (store.data_dir / "cpi_monthly.json").exists()
        assert store.load_raw("cpi") == SERIES

    def test_no_temp_files_left_behind(self, store):
        store.save_series("vix", SERIES)
        store.save_series("vix", SERIES[:1])
        assert [p.name for p in store.data_dir.iterdir()] == ["vix.json"]

    def test_get_frame(self, store):
        store.save_series("vix", SERIES)
        df = store.get_frame("vix")
        assert list(df["value"]) == [4.01, 4.02]
        assert str(df.index[0].date()) == "2024-01-02"

    def test_get_frame_missing(self, store):
        assert store.get_frame("vix").empty


class TestMetadata:
    def test_missing_metadata_is_none(self, store):
        assert store.load_metadata() is None

    def test_metadata_shape(self, store):
        metadata = Metadata(
            last_updated=date(2024, 1, 3),
            series_info={"treasury_10y": SeriesInfo.for_series(SERIES, "DGS10")},
        )
        store.save_metadata(metadata)

        payload = json.loads(store.metadata_path.read_text())
        assert payload == {
            "lastUpdated": "2024-01-03",
            "seriesInfo": {
                "treasury_10y": {"latestDate": "2024-01-03", "recordCount": 2, "sourceId": "DGS10"}
            },
        }
        assert store.load_metadata() == metadata

    def test_reads_legacy_field_name(self, store):
        store.metadata_path.write_text(json.dumps({
            "lastUpdated": "2024-01-03",
            "seriesInfo": {"cpi": {"latestDate": "2024-01-03", "recordCount": 5, "fredSeriesId": "CPIAUCSL"}},
        }))
        assert store.load_metadata().series_info["cpi"].source_id == "CPIAUCSL"


class TestBackup:
    def test_backup_copies_json_files(self, store):
        store.save_series("vix", SERIES)
        store.save_metadata(Metadata(last_updated=date(2024, 1, 3)))

        backup_dir = store.backup()

        assert sorted(p.name for p in backup_dir.iterdir()) == ["metadata.json", "vix.json"]
        assert backup_dir.parent == store.data_dir / "backup"

    def test_backup_of_empty_dir(self, tmp_path):
        assert SeriesStore(tmp_path / "empty").backup() is None
