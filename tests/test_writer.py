"""
Unit tests for the InfluxDB metrics writer.
The influxdb-client InfluxDBClient is patched.
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
import pytz
from pydantic import ValidationError

from flick2influx.config import Settings, settings
from flick2influx.database.writer import MetricsWriter, build_point

WHEN = datetime(2024, 3, 9, 12, 0, tzinfo=pytz.UTC)


@pytest.fixture
def influx_cls():
    with patch("flick2influx.database.writer.InfluxDBClient") as mock_cls:
        yield mock_cls


class TestBuildPoint:
    """Tests for point construction."""

    def test_line_protocol(self):
        point = build_point("PowerUsage", {"usage": Decimal("10.5")}, WHEN)
        assert point.to_line_protocol() == "PowerUsage usage=10.5 1709985600"

    def test_naive_timestamp_is_source_local(self):
        # 2024-03-10 01:00 NZDT is 2024-03-09 12:00 UTC
        point = build_point("PowerUsage", {"usage": 1.5}, datetime(2024, 3, 10, 1, 0))
        assert point.to_line_protocol().endswith(" 1709985600")

    def test_component_field_names(self):
        point = build_point("PredictedPrice.Components",
                            {"network_kwh": Decimal("6.19"), "retailer_spot_price": Decimal("18.25")}, WHEN)
        line = point.to_line_protocol()

        assert line.startswith("PredictedPrice.Components ")
        assert "network_kwh=6.19" in line
        assert "retailer_spot_price=18.25" in line


class TestMetricsWriter:
    """Tests for buffering, flushing and closing."""

    def test_influx_v1_credentials(self, influx_cls):
        MetricsWriter("http://influx:8086", "power", username="influx", password="pw")

        influx_cls.assert_called_once_with(url="http://influx:8086", token="influx:pw", org="-")

    def test_no_credentials(self, influx_cls):
        writer = MetricsWriter("http://influx:8086", "power")

        influx_cls.assert_called_once_with(url="http://influx:8086", token=None, org="-")
        assert writer.bucket == "power"

    def test_writes_are_buffered_until_close(self, influx_cls):
        write_api = influx_cls.return_value.write_api.return_value
        writer = MetricsWriter("http://influx:8086", "power")

        writer.write("PredictedPrice.Total", {"total": Decimal("3.5")}, WHEN)
        writer.write("PowerUsage", {"usage": Decimal("10")}, WHEN)

        assert writer.pending == 2
        write_api.write.assert_not_called()

        writer.close()

        write_api.write.assert_called_once()
        kwargs = write_api.write.call_args.kwargs
        assert kwargs["bucket"] == "power"
        assert [p.to_line_protocol().split(" ")[0] for p in kwargs["record"]] == ["PredictedPrice.Total", "PowerUsage"]
        write_api.close.assert_called_once()
        influx_cls.return_value.close.assert_called_once()
        assert writer.failed_points == 0

    def test_flush_in_batches(self, influx_cls):
        write_api = influx_cls.return_value.write_api.return_value
        writer = MetricsWriter("http://influx:8086", "power", batch_size=2)

        for i in range(5):
            writer.write("PowerUsage", {"usage": i + 1}, WHEN)
        writer.close()

        assert [len(c.kwargs["record"]) for c in write_api.write.call_args_list] == [2, 2, 1]

    def test_failed_batch_is_counted_not_raised(self, influx_cls):
        write_api = influx_cls.return_value.write_api.return_value
        write_api.write.side_effect = [ConnectionError("influx down"), None]
        writer = MetricsWriter("http://influx:8086", "power", batch_size=2)

        for i in range(3):
            writer.write("PowerUsage", {"usage": i + 1}, WHEN)
        writer.close()

        assert writer.failed_points == 2
        assert write_api.write.call_count == 2
        influx_cls.return_value.close.assert_called_once()

    def test_point_without_fields_skipped(self, influx_cls):
        writer = MetricsWriter("http://influx:8086", "power")

        writer.write("PredictedPrice.Components", {}, WHEN)

        assert writer.pending == 0

    def test_close_with_nothing_buffered(self, influx_cls):
        write_api = influx_cls.return_value.write_api.return_value
        writer = MetricsWriter("http://influx:8086", "power")

        writer.close()
        writer.close()

        write_api.write.assert_not_called()
        influx_cls.return_value.close.assert_called_once()

    def test_write_after_close(self, influx_cls):
        writer = MetricsWriter("http://influx:8086", "power")
        writer.close()

        with pytest.raises(RuntimeError):
            writer.write("PowerUsage", {"usage": 1.0}, WHEN)

    @pytest.mark.parametrize("batch_size", [0, -1])
    def test_batch_size_must_be_positive(self, influx_cls, batch_size):
        with pytest.raises(ValueError, match="batch_size must be positive"):
            MetricsWriter("http://influx:8086", "power", batch_size=batch_size)

        influx_cls.assert_not_called()

    def test_default_batch_size_from_settings(self, influx_cls):
        writer = MetricsWriter("http://influx:8086", "power")
        assert writer.batch_size == settings.influx_batch_size


class TestBatchSizeSetting:
    """Tests for the configured flush batch size."""

    @pytest.mark.parametrize("batch_size", [0, -5])
    def test_non_positive_batch_size_rejected(self, batch_size):
        with pytest.raises(ValidationError):
            Settings(influx_batch_size=batch_size)

    def test_batch_size_from_environment(self, monkeypatch):
        monkeypatch.setenv("INFLUX_BATCH_SIZE", "250")
        assert Settings().influx_batch_size == 250
