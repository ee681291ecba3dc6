"""Pytest tests for the Bandix HTTP client."""

import asyncio
import pytest
import requests
from unittest.mock import Mock, patch

from src.bandix_client.client import BandixClient, create_client
from src.bandix_client.demo import DemoClient
from src.bandix_client.exceptions import *
from src.bandix_client.models import STATUS_UNAVAILABLE, SpeedLimit
from src.telemetry.scheduler import PollScheduler
from src.telemetry.store import StateStore


def make_response(status_code=200, json_data=None, content=b'{}', text=''):
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return BandixClient(
        base_url='http://192.168.1.1/',
        api_path='/cgi-bin/luci/admin/services/bandix',
        timeout=3,
        verify_ssl=True,
        session=session,
    )


class TestBandixClientInit:
    """Test cases for client construction."""

    @pytest.mark.unit
    def test_api_base(self, client):
        assert client.base_url == 'http://192.168.1.1'
        assert client.api_base == 'http://192.168.1.1/cgi-bin/luci/admin/services/bandix'
        assert client.timeout == 3
        assert client.read_errors == {}

    @pytest.mark.unit
    def test_api_base_from_settings(self, session):
        with patch('src.bandix_client.client.settings.get_api_base', return_value='http://10.0.0.1/bandix') as mock_base:
            client = BandixClient(session=session)
        mock_base.assert_called_once_with()
        assert client.api_base == 'http://10.0.0.1/bandix'

    @pytest.mark.unit
    def test_insecure_https_disables_warnings(self, session):
        with patch('src.bandix_client.client.urllib3.disable_warnings') as mock_disable:
            BandixClient(base_url='https://router.lan', api_path='bandix', verify_ssl=False, session=session)
            mock_disable.assert_called_once()

    @pytest.mark.unit
    def test_create_client_demo(self):
        assert isinstance(create_client(demo=True), DemoClient)
        assert isinstance(create_client(demo=False, base_url='http://10.0.0.1'), BandixClient)


class TestBandixClientReads:
    """Test cases for strict and safe reads."""

    @pytest.mark.unit
    def test_get_clients(self, client, session, sample_clients_payload):
        session.request.return_value = make_response(json_data=sample_clients_payload)

        devices = client.get_clients()

        assert [device.mac for device in devices] == ['AA:BB:CC:00:00:01', 'AA:BB:CC:00:00:02']
        session.request.assert_called_once_with(
            method='GET',
            url='http://192.168.1.1/cgi-bin/luci/admin/services/bandix/clients',
            json=None,
            verify=True,
            timeout=3,
        )

    @pytest.mark.unit
    def test_get_history_sorted(self, client, session, sample_history_payload):
        session.request.return_value = make_response(json_data=sample_history_payload)
        assert [point.timestamp for point in client.get_history()] == [1000, 2000, 3000]

    @pytest.mark.unit
    def test_http_error_raises_api_error(self, client, session):
        session.request.return_value = make_response(status_code=500, text='boom')

        with pytest.raises(APIError) as excinfo:
            client.get_status()

        assert excinfo.value.status_code == 500
        assert excinfo.value.response_text == 'boom'

    @pytest.mark.unit
    def test_transport_error_raises_connection_error(self, client, session):
        session.request.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(ConnectionError):
            client.get_totals()

    @pytest.mark.unit
    def test_invalid_json_raises_payload_error(self, client, session):
        session.request.return_value = make_response(json_data=ValueError("bad json"))

        with pytest.raises(PayloadError):
            client.get_clients()

    @pytest.mark.unit
    def test_fetch_defaults_on_failure(self, client, session):
        """Test safe reads mask failures and record them."""
        session.request.side_effect = requests.exceptions.ConnectionError("unreachable")

        assert client.fetch_clients() == []
        assert client.fetch_history() == []
        assert client.fetch_status() == STATUS_UNAVAILABLE
        assert client.fetch_totals() is None
        assert set(client.read_errors) == {'clients', 'history', 'status', 'stats'}

    @pytest.mark.unit
    def test_fetch_clears_error_on_success(self, client, session, sample_clients_payload):
        session.request.side_effect = requests.exceptions.ConnectionError("unreachable")
        client.fetch_clients()
        assert 'clients' in client.read_errors

        session.request.side_effect = None
        session.request.return_value = make_response(json_data=sample_clients_payload)
        assert len(client.fetch_clients()) == 2
        assert client.read_errors == {}

    @pytest.mark.unit
    def test_malformed_payload_is_a_failed_read(self, client, session):
        session.request.return_value = make_response(json_data={'not': 'a list'})
        assert client.fetch_clients() == []
        assert 'clients' in client.read_errors

    @pytest.mark.unit
    @pytest.mark.parametrize('value', [float('inf'), float('-inf'), float('nan'), 'inf', '1e999'])
    def test_non_finite_number_is_a_failed_read(self, client, session, value):
        session.request.return_value = make_response(
            json_data=[{'mac': 'AA:BB:CC:00:00:01', 'download': value}]
        )

        with pytest.raises(PayloadError):
            client.get_clients()
        assert client.fetch_clients() == []
        assert 'clients' in client.read_errors

    @pytest.mark.unit
    def test_non_finite_history_does_not_abort_cycle(self, client, session, sample_clients_payload):
        def respond(method, url, **kwargs):
            if url.endswith('/history'):
                return make_response(json_data=[{'timestamp': 1000, 'download': float('inf'), 'upload': 0}])
            if url.endswith('/clients'):
                return make_response(json_data=sample_clients_payload)
            if url.endswith('/status'):
                return make_response(json_data={'running': True, 'interface': 'br-lan', 'uptime': 5})
            return make_response(json_data={'download': 1, 'upload': 2, 'combined': 3})

        session.request.side_effect = respond
        store = StateStore(history_source='server')
        scheduler = PollScheduler(client, store, interval=1)

        assert asyncio.run(scheduler.trigger()) is True
        assert store.state.poll_count == 1
        assert len(store.state.devices) == 2
        assert store.state.history == ()
        assert 'history' in client.read_errors
        assert store.state.consecutive_failures == 1


class TestBandixClientWrites:
    """Test cases for limit, interface and service writes."""

    @pytest.mark.unit
    def test_set_limit_payload(self, client, session):
        session.request.return_value = make_response(json_data={'success': True})
        limit = SpeedLimit(enabled=True, download_limit=5000, upload_limit=2500)

        result = client.set_limit('AA:BB:CC:00:00:01', limit)

        assert result == {'success': True}
        kwargs = session.request.call_args.kwargs
        assert kwargs['method'] == 'POST'
        assert kwargs['url'].endswith('/limit')
        assert kwargs['json'] == {
            'mac': 'AA:BB:CC:00:00:01',
            'limit': {'enabled': True, 'downloadLimit': 5000, 'uploadLimit': 2500},
        }

    @pytest.mark.unit
    def test_clear_limit_sends_null(self, client, session):
        session.request.return_value = make_response(content=b'')

        assert client.set_limit('AA:BB:CC:00:00:01', None) == {}
        assert session.request.call_args.kwargs['json'] == {'mac': 'AA:BB:CC:00:00:01', 'limit': None}

    @pytest.mark.unit
    def test_set_limit_invalid_mac(self, client, session):
        with pytest.raises(LimitError):
            client.set_limit('not-a-mac', None)
        session.request.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.parametrize('download, upload', [(50, 500), (200000, 500), (5000, 60000)])
    def test_set_limit_out_of_range(self, client, session, download, upload):
        with pytest.raises(LimitError):
            client.set_limit('AA:BB:CC:00:00:01', SpeedLimit(enabled=True, download_limit=download, upload_limit=upload))
        session.request.assert_not_called()

    @pytest.mark.unit
    def test_write_failure_propagates(self, client, session):
        session.request.return_value = make_response(status_code=403, text='denied')
        with pytest.raises(APIError):
            client.set_interface('wlan0')

    @pytest.mark.unit
    def test_control_service(self, client, session):
        session.request.return_value = make_response(json_data=['ok'])

        assert client.control_service('restart') == {}
        assert session.request.call_args.kwargs['json'] == {'action': 'restart'}

        with pytest.raises(BandixError):
            client.control_service('reboot')
