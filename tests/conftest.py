"""Pytest fixtures for Bandix dashboard tests."""

import pytest
from pathlib import Path
from typing import Dict, Any, List
from unittest.mock import Mock


def pytest_configure(config):
    """Register custom pytest marks."""
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: Slow running tests"
    )

# Add the project root to the Python path
import sys
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.bandix_client.models import (
    BandwidthSnapshot, DeviceRecord, ServiceStatus, SpeedLimit, TotalsSnapshot
)


@pytest.fixture
def sample_clients_payload() -> List[Dict[str, Any]]:
    """Fixture providing a /clients payload as the router sends it."""
    return [
        {
            'ip': '192.168.1.10',
            'mac': 'AA:BB:CC:00:00:01',
            'hostname': 'laptop.lan',
            'download': 1000,
            'upload': 500,
            'downloadSpeed': 200,
            'uploadSpeed': 50,
            'lastSeen': 1700000000000,
        },
        {
            'ip': '192.168.1.2',
            'mac': 'AA:BB:CC:00:00:02',
            'hostname': 'phone',
            'download': 500,
            'upload': 600,
            'downloadSpeed': 100,
            'uploadSpeed': 300,
            'lastSeen': 1700000000000,
            'speedLimit': {'enabled': True, 'downloadLimit': 5000, 'uploadLimit': 2500},
        },
    ]


@pytest.fixture
def sample_history_payload() -> List[Dict[str, Any]]:
    """Fixture providing an unordered /history payload."""
    return [
        {'timestamp': 3000, 'download': 300, 'upload': 30},
        {'timestamp': 1000, 'download': 100, 'upload': 10},
        {'timestamp': 2000, 'download': 200, 'upload': 20},
    ]


@pytest.fixture
def sample_devices(sample_clients_payload) -> List[DeviceRecord]:
    """Fixture providing parsed device records."""
    return [DeviceRecord.from_dict(item) for item in sample_clients_payload]


@pytest.fixture
def sample_history() -> List[BandwidthSnapshot]:
    """Fixture providing an ordered history series."""
    return [
        BandwidthSnapshot(timestamp=1000, download=100, upload=10),
        BandwidthSnapshot(timestamp=2000, download=200, upload=20),
        BandwidthSnapshot(timestamp=3000, download=300, upload=30),
    ]


@pytest.fixture
def running_status() -> ServiceStatus:
    return ServiceStatus(running=True, interface='br-lan', uptime=3600, version='2.1.0')


@pytest.fixture
def mock_client(sample_devices, sample_history, running_status):
    """Fixture providing a mocked backend client with successful reads."""
    mock_client = Mock()
    mock_client.api_base = 'http://192.168.1.1/cgi-bin/luci/admin/services/bandix'
    mock_client.read_errors = {}

    mock_client.fetch_clients.return_value = sample_devices
    mock_client.fetch_history.return_value = sample_history
    mock_client.fetch_status.return_value = running_status
    mock_client.fetch_totals.return_value = TotalsSnapshot(download=1500, upload=1100, combined=2600)

    mock_client.get_clients.return_value = sample_devices
    mock_client.get_history.return_value = sample_history
    mock_client.get_status.return_value = running_status

    mock_client.set_limit.return_value = {}
    mock_client.set_interface.return_value = {}
    mock_client.control_service.return_value = {}

    return mock_client


@pytest.fixture
def limited_device() -> DeviceRecord:
    return DeviceRecord(
        mac='AA:BB:CC:00:00:09',
        ip='192.168.1.9',
        hostname='tv',
        speed_limit=SpeedLimit(enabled=True, download_limit=1000, upload_limit=500),
    )
