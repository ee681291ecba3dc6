"""HTTP client for the bandixd LuCI endpoints."""

import requests
import urllib3
from typing import Dict, Any, Optional, List

from .exceptions import *
from .demo import DemoClient
from .models import (
    BandwidthSnapshot, DeviceRecord, ServiceStatus, SpeedLimit, TotalsSnapshot,
    STATUS_UNAVAILABLE, parse_devices, parse_history,
)
from ..utils.logger import get_logger, update_logger_endpoint_context
from ..utils.validators import (
    DOWNLOAD_LIMIT_RANGE, UPLOAD_LIMIT_RANGE,
    validate_interface_name, validate_limit_kbps, validate_mac_address, validate_service_action
)
from config.settings import settings

logger = get_logger(__name__)


class BandixClient:
    """Client for the Bandix router backend.

    Reads come in two flavours: ``get_*`` raises a BandixError subclass on
    any failure, ``fetch_*`` logs the failure and returns a safe default so a
    poll cycle never aborts. Writes always raise.
    """

    def __init__(self, base_url: str = None, api_path: str = None, timeout: float = None,
                 verify_ssl: bool = None, session: requests.Session = None):
        """
        Initialize the client.

        Args:
            base_url: Router URL, e.g. http://192.168.1.1 (defaults to settings)
            api_path: LuCI path of the bandix service (defaults to settings)
            timeout: Per-request timeout in seconds
            verify_ssl: Verify TLS certificates for https routers
            session: Optional pre-built requests session
        """
        self.base_url = (base_url or settings.get('bandix.base_url') or '').rstrip('/')
        if base_url is None and api_path is None:
            self.api_base = settings.get_api_base()
        else:
            path = api_path or settings.get('bandix.api_path')
            self.api_base = f"{self.base_url}/{path.strip('/')}"
        self.timeout = timeout if timeout is not None else settings.get('bandix.timeout', 5)
        self.verify_ssl = verify_ssl if verify_ssl is not None else settings.get('bandix.verify_ssl', True)
        self.session = session or requests.Session()
        # Last error per failing read, cleared when that read succeeds again
        self.read_errors: Dict[str, str] = {}

        if not self.base_url:
            raise ConfigurationError("Router base URL must be specified")

        update_logger_endpoint_context(logger, self.api_base)

        # Disable SSL warnings if verification is disabled
        if self.base_url.startswith('https') and not self.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning("SSL verification is disabled for the router connection")

    def close(self):
        """Release pooled connections."""
        self.session.close()

    # ========================================
    # Transport
    # ========================================

    def _make_request(self, method: str, endpoint: str, payload: Any = None) -> requests.Response:
        """Perform one HTTP request; non-2xx responses raise APIError."""
        url = f"{self.api_base}/{endpoint}"
        logger.debug(f"Making {method} request to {url}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=payload if method == 'POST' else None,
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Failed to connect to router: {e}")

        if not 200 <= response.status_code < 300:
            raise APIError(
                f"{method} /{endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
                response_text=response.text,
            )
        return response

    def _get_json(self, endpoint: str) -> Any:
        response = self._make_request('GET', endpoint)
        try:
            return response.json()
        except ValueError as e:
            raise PayloadError(f"Invalid JSON from /{endpoint}: {e}")

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._make_request('POST', endpoint, payload)
        # Acknowledgements carry no required body
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    # ========================================
    # Reads
    # ========================================

    def get_clients(self) -> List[DeviceRecord]:
        return parse_devices(self._get_json('clients'))

    def get_history(self) -> List[BandwidthSnapshot]:
        return parse_history(self._get_json('history'))

    def get_status(self) -> ServiceStatus:
        return ServiceStatus.from_dict(self._get_json('status'))

    def get_totals(self) -> TotalsSnapshot:
        return TotalsSnapshot.from_dict(self._get_json('stats'))

    def _fetch(self, name: str, read, default):
        try:
            result = read()
        except BandixError as e:
            logger.warning(f"Failed to fetch {name}: {e}")
            self.read_errors[name] = str(e)
            return default
        self.read_errors.pop(name, None)
        return result

    def fetch_clients(self) -> List[DeviceRecord]:
        """Device list, or an empty list when the read fails."""
        return self._fetch('clients', self.get_clients, [])

    def fetch_history(self) -> List[BandwidthSnapshot]:
        """Server history, or an empty series when the read fails."""
        return self._fetch('history', self.get_history, [])

    def fetch_status(self) -> ServiceStatus:
        """Service status, or the 'not running' placeholder when the read fails."""
        return self._fetch('status', self.get_status, STATUS_UNAVAILABLE)

    def fetch_totals(self) -> Optional[TotalsSnapshot]:
        """Server-side totals, or None when the read fails."""
        return self._fetch('stats', self.get_totals, None)

    # ========================================
    # Writes
    # ========================================

    def set_limit(self, mac: str, limit: Optional[SpeedLimit]) -> Dict[str, Any]:
        """Set or clear (limit=None) the speed limit of one device."""
        if not validate_mac_address(mac):
            raise LimitError(f"Invalid MAC address: {mac}")
        if limit is not None:
            if not validate_limit_kbps(limit.download_limit, DOWNLOAD_LIMIT_RANGE):
                raise LimitError(f"Download limit out of range: {limit.download_limit} kbps")
            if not validate_limit_kbps(limit.upload_limit, UPLOAD_LIMIT_RANGE):
                raise LimitError(f"Upload limit out of range: {limit.upload_limit} kbps")

        payload = {'mac': mac, 'limit': limit.to_dict() if limit is not None else None}
        if limit is None:
            logger.info(f"Removing speed limit for {mac}")
        else:
            logger.info(f"Setting speed limit for {mac}: {limit.download_limit}/{limit.upload_limit} kbps")
        return self._post('limit', payload)

    def set_interface(self, interface: str) -> Dict[str, Any]:
        """Select the interface bandixd monitors."""
        if not validate_interface_name(interface):
            raise BandixError(f"Invalid interface name: {interface}")
        logger.info(f"Switching monitored interface to {interface}")
        return self._post('interface', {'interface': interface})

    def control_service(self, action: str) -> Dict[str, Any]:
        """Start, stop or restart the bandixd service."""
        if not validate_service_action(action):
            raise BandixError(f"Unknown service action: {action}")
        logger.info(f"Service action: {action}")
        return self._post('service', {'action': action})


def create_client(demo: bool = None, **kwargs):
    """Build the backend client configured in settings.

    Returns a DemoClient when demo mode is on, otherwise a BandixClient.
    """
    if demo is None:
        demo = settings.get('bandix.demo_mode', False)
    if demo:
        logger.info("Demo mode enabled, using generated data")
        return DemoClient()
    return BandixClient(**kwargs)
