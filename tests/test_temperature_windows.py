"""Tests for the OpenHardwareMonitor-based temperature reader."""

from __future__ import annotations

import types
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from cputemp.models.temperature_models import SensorNode
from cputemp.temperature.errors import (
    NoDataError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolStartupTimeoutError,
)
from cputemp.temperature.windows import (
    HELPER_RELATIVE_PATH,
    OpenHardwareMonitorReader,
    find_helper,
    helper_candidates,
    iter_core_temperatures,
)

SENSOR_TREE = {
    "id": 0,
    "Text": "Sensor",
    "Min": "Min",
    "Value": "Value",
    "Max": "Max",
    "ImageURL": "",
    "Children": [
        {
            "id": 1,
            "Text": "DESKTOP-01",
            "Min": "",
            "Value": "",
            "Max": "",
            "ImageURL": "images_icon/computer.png",
            "Children": [
                {
                    "id": 2,
                    "Text": "Intel Core i7-8700",
                    "Min": "",
                    "Value": "",
                    "Max": "",
                    "ImageURL": "images_icon/cpu.png",
                    "Children": [
                        {
                            "id": 3,
                            "Text": "Clocks",
                            "Min": "",
                            "Value": "",
                            "Max": "",
                            "ImageURL": "images_icon/clock.png",
                            "Children": [
                                {
                                    "id": 4,
                                    "Text": "CPU Core #1",
                                    "Min": "800 MHz",
                                    "Value": "3600 MHz",
                                    "Max": "4600 MHz",
                                    "ImageURL": "images/transparent.png",
                                    "Children": [],
                                }
                            ],
                        },
                        {
                            "id": 5,
                            "Text": "Temperatures",
                            "Min": "",
                            "Value": "",
                            "Max": "",
                            "ImageURL": "images_icon/temperature.png",
                            "Children": [
                                {
                                    "id": 6,
                                    "Text": "CPU Core #1",
                                    "Min": "40 °C",
                                    "Value": "60 °C",
                                    "Max": "80 °C",
                                    "ImageURL": "images/transparent.png",
                                    "Children": [],
                                },
                                {
                                    "id": 7,
                                    "Text": "CPU Core #2",
                                    "Min": "41 °C",
                                    "Value": "70 °C",
                                    "Max": "82 °C",
                                    "ImageURL": "images/transparent.png",
                                    "Children": [],
                                },
                                {
                                    "id": 8,
                                    "Text": "CPU Package",
                                    "Min": "45 °C",
                                    "Value": "65 °C",
                                    "Max": "85 °C",
                                    "ImageURL": "images/transparent.png",
                                    "Children": [],
                                },
                            ],
                        },
                    ],
                }
            ],
        }
    ],
}


def _response(status_code: int = 200, payload=None):
    def raise_for_status():
        if status_code != 200:
            raise requests.HTTPError(f"{status_code} Error")

    def json():
        if payload is None:
            raise ValueError("Expecting value")
        return payload

    return types.SimpleNamespace(
        status_code=status_code, json=json, raise_for_status=raise_for_status
    )


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record sleeps instead of waiting."""
    sleeps: list[float] = []
    monkeypatch.setattr("time.sleep", sleeps.append)
    return sleeps


@pytest.fixture
def ready_reader() -> OpenHardwareMonitorReader:
    """Reader that skips helper discovery and startup."""
    reader = OpenHardwareMonitorReader(url="http://127.0.0.1:8085/data.json")
    reader._ready = True
    return reader


def test_iter_core_temperatures_excludes_package():
    """Only CPU Core children of Temperatures groups are collected."""
    root = SensorNode.model_validate(SENSOR_TREE)

    assert list(iter_core_temperatures(root)) == [60.0, 70.0]


def test_iter_core_temperatures_walks_multiple_groups():
    """Every Temperatures group in the tree contributes, depth first."""
    root = SensorNode.model_validate(
        {
            "Text": "Sensor",
            "Children": [
                {
                    "Text": "CPU 0",
                    "Children": [
                        {
                            "Text": "Temperatures",
                            "Children": [{"Text": "CPU Core #1", "Value": "50 °C"}],
                        }
                    ],
                },
                {
                    "Text": "CPU 1",
                    "Children": [
                        {
                            "Text": "Temperatures",
                            "Children": [
                                {"Text": "CPU Core #1", "Value": "52.5 °C"},
                                {"Text": "CPU Core #2", "Value": "-"},
                            ],
                        }
                    ],
                },
            ],
        }
    )

    assert list(iter_core_temperatures(root)) == [50.0, 52.5]


def test_fetch_aggregates_core_temperatures(
    monkeypatch: pytest.MonkeyPatch, ready_reader
):
    """Two cores at 60 and 70 degrees, package reading excluded."""
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(payload=SENSOR_TREE)
    )

    stats = ready_reader.fetch()

    assert stats.core_count == 2
    assert stats.min == 60.0
    assert stats.max == 70.0
    assert stats.avg == 65.0


def test_fetch_without_core_sensors_raises_no_data(
    monkeypatch: pytest.MonkeyPatch, ready_reader
):
    """A tree without CPU core temperatures is NoDataError."""
    tree = {"Text": "Sensor", "Children": [{"Text": "Temperatures", "Children": []}]}
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(payload=tree)
    )

    with pytest.raises(NoDataError):
        ready_reader.fetch()


def test_fetch_invalid_json_raises_execution_error(
    monkeypatch: pytest.MonkeyPatch, ready_reader
):
    """A body that is not JSON is reported as an execution error."""
    monkeypatch.setattr("requests.get", lambda *_args, **_kwargs: _response())

    with pytest.raises(ToolExecutionError):
        ready_reader.fetch()


def test_fetch_too_deep_tree_raises_execution_error(
    monkeypatch: pytest.MonkeyPatch, ready_reader
):
    """A tree too deeply nested to decode is an execution error."""
    response = _response(payload=SENSOR_TREE)
    response.json = MagicMock(side_effect=RecursionError("maximum recursion depth"))
    monkeypatch.setattr("requests.get", lambda *_args, **_kwargs: response)

    with pytest.raises(ToolExecutionError):
        ready_reader.fetch()


def test_fetch_http_error_raises_execution_error(
    monkeypatch: pytest.MonkeyPatch, ready_reader
):
    """Non-200 answers during steady state are execution errors."""
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(status_code=500)
    )

    with pytest.raises(ToolExecutionError):
        ready_reader.fetch()


def test_wait_until_ready_exhausts_attempts(
    monkeypatch: pytest.MonkeyPatch, no_sleep
):
    """Ten non-200 answers end in ToolStartupTimeoutError."""
    calls: list[float] = []

    def fake_get(_url, timeout):
        calls.append(timeout)
        return _response(status_code=503)

    monkeypatch.setattr("requests.get", fake_get)

    reader = OpenHardwareMonitorReader()
    with pytest.raises(ToolStartupTimeoutError) as excinfo:
        reader.wait_until_ready()

    assert excinfo.value.attempts == 10
    assert calls == [1.0] * 10
    assert no_sleep == [1.0] * 9


def test_wait_until_ready_retries_timeouts(monkeypatch: pytest.MonkeyPatch, no_sleep):
    """Timeouts and refused connections are retried until the helper answers."""
    answers = [
        requests.ConnectionError("refused"),
        requests.Timeout("timed out"),
        _response(status_code=200, payload=SENSOR_TREE),
    ]

    def fake_get(_url, timeout):
        answer = answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    monkeypatch.setattr("requests.get", fake_get)

    OpenHardwareMonitorReader().wait_until_ready()

    assert answers == []
    assert len(no_sleep) == 2


def test_find_helper_prefers_first_candidate(tmp_path: Path):
    """The program directory wins over the working directory."""
    first = tmp_path / "app" / HELPER_RELATIVE_PATH
    second = tmp_path / "cwd" / HELPER_RELATIVE_PATH
    for path in (first, second):
        path.parent.mkdir(parents=True)
        path.write_bytes(b"MZ")

    assert find_helper([first, second]) == first


def test_find_helper_missing_raises_not_found(tmp_path: Path):
    """Missing helper lists the searched locations."""
    candidates = [tmp_path / "a.exe", tmp_path / "b.exe"]

    with pytest.raises(ToolNotFoundError) as excinfo:
        find_helper(candidates)

    assert excinfo.value.searched == [str(p) for p in candidates]


def test_helper_candidates_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """CPUTEMP_OHM_PATH replaces the default search locations."""
    helper = tmp_path / "ohm.exe"
    monkeypatch.setenv("CPUTEMP_OHM_PATH", str(helper))

    assert helper_candidates() == [helper]


def test_helper_candidates_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Without override, the program and working directories are searched."""
    monkeypatch.delenv("CPUTEMP_OHM_PATH", raising=False)
    monkeypatch.chdir(tmp_path)

    candidates = helper_candidates()

    assert len(candidates) == 2
    assert candidates[1] == tmp_path / HELPER_RELATIVE_PATH


def test_prepare_launches_helper_and_waits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, no_sleep
):
    """prepare() starts the helper once and waits for its endpoint."""
    helper = tmp_path / "OpenHardwareMonitor.exe"
    helper.write_bytes(b"MZ")
    popen = MagicMock()
    popen.return_value.wait.return_value = 0
    monkeypatch.setattr("subprocess.Popen", popen)
    monkeypatch.setattr("psutil.process_iter", lambda _attrs: [])
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(payload=SENSOR_TREE)
    )

    reader = OpenHardwareMonitorReader(helper_path=helper)
    reader.prepare()
    reader.prepare()

    popen.assert_called_once()
    assert popen.call_args.args[0] == [str(helper)]
    assert reader.fetch().core_count == 2


def test_prepare_reuses_running_helper(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, no_sleep
):
    """An already running helper is not launched a second time."""
    helper = tmp_path / "OpenHardwareMonitor.exe"
    helper.write_bytes(b"MZ")
    popen = MagicMock()
    running = types.SimpleNamespace(info={"name": "OpenHardwareMonitor.exe"})
    monkeypatch.setattr("subprocess.Popen", popen)
    monkeypatch.setattr("psutil.process_iter", lambda _attrs: [running])
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(payload=SENSOR_TREE)
    )

    OpenHardwareMonitorReader(helper_path=helper).prepare()

    popen.assert_not_called()


def test_failed_helper_exit_is_reported_on_fetch(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, no_sleep
):
    """A helper that dies with an error fails the next fetch."""
    helper = tmp_path / "OpenHardwareMonitor.exe"
    helper.write_bytes(b"MZ")
    popen = MagicMock()
    popen.return_value.wait.return_value = 3
    monkeypatch.setattr("subprocess.Popen", popen)
    monkeypatch.setattr("psutil.process_iter", lambda _attrs: [])
    monkeypatch.setattr(
        "requests.get", lambda *_args, **_kwargs: _response(payload=SENSOR_TREE)
    )

    reader = OpenHardwareMonitorReader(helper_path=helper)
    reader.prepare()
    reader._watcher.join(timeout=5)

    with pytest.raises(ToolExecutionError) as excinfo:
        reader.fetch()

    assert "status 3" in str(excinfo.value)


def test_prepare_without_helper_raises_not_found(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
):
    """No helper executable means ToolNotFoundError before any request."""
    monkeypatch.setenv("CPUTEMP_OHM_PATH", str(tmp_path / "missing.exe"))
    get = MagicMock()
    monkeypatch.setattr("requests.get", get)

    with pytest.raises(ToolNotFoundError):
        OpenHardwareMonitorReader().prepare()

    get.assert_not_called()
