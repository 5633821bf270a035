from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from liveclass.services import base as base_module
from liveclass.services.base import BaseService


class SampleService(BaseService):
    @BaseService.measure_operation("succeed")
    def succeed(self) -> str:
        return "ok"

    @BaseService.measure_operation("explode")
    def explode(self) -> None:
        raise RuntimeError("boom")


@pytest.fixture(autouse=True)
def _clear_metrics():
    BaseService._class_metrics.clear()
    yield
    BaseService._class_metrics.clear()


class TestMeasureOperation:
    def test_records_success_and_failure(self) -> None:
        service = SampleService(Mock())

        assert service.succeed() == "ok"
        with pytest.raises(RuntimeError):
            service.explode()

        metrics = service.get_metrics()
        assert metrics["succeed"]["count"] == 1
        assert metrics["succeed"]["success_rate"] == 1.0
        assert metrics["explode"]["success_rate"] == 0.0

    def test_slow_operation_logs_warning(self) -> None:
        service = SampleService(Mock())

        with patch("liveclass.services.base.time.time", side_effect=[0.0, 2.0]):
            with patch.object(service.logger, "warning") as mock_warning:
                assert service.succeed() == "ok"

        mock_warning.assert_called_once()

    def test_prometheus_failure_does_not_break_operation(self, monkeypatch) -> None:
        service = SampleService(Mock())
        broken = Mock()
        broken.record_service_operation.side_effect = RuntimeError("metrics down")
        monkeypatch.setattr(base_module, "prometheus_metrics", broken)

        assert service.succeed() == "ok"

    def test_get_metrics_skips_zero_count(self) -> None:
        service = SampleService(Mock())
        BaseService._class_metrics[service.__class__.__name__] = {
            "zero": {
                "count": 0,
                "total_time": 0.0,
                "success_count": 0,
                "failure_count": 0,
                "max_time": 0.0,
            }
        }

        assert service.get_metrics() == {}
