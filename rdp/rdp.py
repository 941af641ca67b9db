import requests
from typing import Dict, Optional, List
import logging
import configparser
import os
import time

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class RDPClient:
    """
    Refinitiv Data Platform REST client.

    Wraps the three endpoints used by the delta hedging demo:
    - pricing chains view (option chain constituents)
    - pricing snapshots (last trade / historical close)
    - IPA financial contracts (option analytics)

    Authentication uses the platform OAuth2 password grant with the
    machine ID, password and application key from rdp.conf.
    """

    CHAIN_URL = "/data/pricing/beta3/views/chains"
    SNAPSHOT_URL = "/data/pricing/snapshots/v1/"
    FINANCIAL_CONTRACTS_URL = "/data/quantitative-analytics/v1/financial-contracts"

    # Refresh the token this many seconds before it expires
    TOKEN_EXPIRY_MARGIN = 30

    def __init__(self, config_file: str = "rdp.conf"):
        """
        Initialize the RDP client.

        Args:
            config_file: Path to configuration file (default: rdp.conf)
        """
        self.config = self._load_config(config_file)
        self.base_url = self.config.get('api', 'base_url').rstrip('/')
        self.timeout = self.config.getfloat('api', 'timeout', fallback=30.0)
        self.session = requests.Session()

        # Set logging level from config
        log_level = self.config.get('logging', 'level', fallback='INFO')
        logger.setLevel(getattr(logging, log_level.upper()))

        # Token state
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.token_expiry: float = 0.0

    def _load_config(self, config_file: str) -> configparser.ConfigParser:
        """
        Load configuration from file.

        Args:
            config_file: Path to configuration file

        Returns:
            ConfigParser object with loaded configuration
        """
        config = configparser.ConfigParser()

        # Try to find config file in current directory or same directory as this module
        config_paths = [
            config_file,
            os.path.join(os.path.dirname(__file__), config_file)
        ]

        for path in config_paths:
            if os.path.exists(path):
                config.read(path)
                logger.info(f"Loaded configuration from {path}")
                return config

        logger.warning("Configuration file not found, using defaults")
        config.add_section('api')
        config.set('api', 'base_url', 'https://api.refinitiv.com')
        config.set('api', 'timeout', '30')
        config.add_section('auth')
        config.set('auth', 'token_url', '/auth/oauth2/v1/token')
        config.set('auth', 'scope', 'trapi')
        config.add_section('credentials')
        config.set('credentials', 'username', '')
        config.set('credentials', 'password', '')
        config.set('credentials', 'app_key', '')
        config.add_section('logging')
        config.set('logging', 'level', 'INFO')

        return config

    @property
    def token_url(self) -> str:
        token_url = self.config.get('auth', 'token_url', fallback='/auth/oauth2/v1/token')
        if token_url.startswith('http'):
            return token_url
        return f"{self.base_url}{token_url}"

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def authenticate(self) -> bool:
        """
        Request an access token with the configured machine credentials.

        Returns:
            True if a token was granted, False otherwise
        """
        username = self.config.get('credentials', 'username', fallback='').strip()
        password = self.config.get('credentials', 'password', fallback='').strip()
        app_key = self.config.get('credentials', 'app_key', fallback='').strip()

        if not username or not password or not app_key:
            logger.error("Missing credentials: username, password and app_key must be set in [credentials]")
            return False

        data = {
            'grant_type': 'password',
            'username': username,
            'password': password,
            'client_id': app_key,
            'scope': self.config.get('auth', 'scope', fallback='trapi'),
            'takeExclusiveSignOnControl': 'true',
        }

        logger.info(f"Authenticating {username} against {self.token_url}")
        return self._request_token(data)

    def refresh(self) -> bool:
        """
        Refresh the access token using the refresh token from the last grant.

        Returns:
            True if a new token was granted, False otherwise
        """
        if not self.refresh_token:
            logger.debug("No refresh token, performing full authentication")
            return self.authenticate()

        data = {
            'grant_type': 'refresh_token',
            'refresh_token': self.refresh_token,
            'username': self.config.get('credentials', 'username', fallback=''),
            'client_id': self.config.get('credentials', 'app_key', fallback=''),
        }

        logger.debug("Refreshing access token")
        if self._request_token(data):
            return True

        logger.warning("Token refresh failed, re-authenticating")
        return self.authenticate()

    def _request_token(self, data: Dict[str, str]) -> bool:
        try:
            response = self.session.post(
                self.token_url,
                data=data,
                headers={'Accept': 'application/json'},
                timeout=self.timeout
            )
            response.raise_for_status()
            token = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Authentication failed: {e}")
            self.access_token = None
            return False

        self.access_token = token.get('access_token')
        self.refresh_token = token.get('refresh_token', self.refresh_token)
        expires_in = float(token.get('expires_in', 300))
        self.token_expiry = time.time() + expires_in

        if not self.access_token:
            logger.error(f"Token response did not contain an access token: {token}")
            return False

        logger.info(f"Authenticated, token valid for {expires_in:.0f}s")
        return True

    def _ensure_token(self) -> bool:
        if not self.access_token:
            return self.authenticate()
        if time.time() >= self.token_expiry - self.TOKEN_EXPIRY_MARGIN:
            return self.refresh()
        return True

    def _make_request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Make an authorized HTTP request against the platform.

        Args:
            method: HTTP method (GET or POST)
            path: Endpoint path relative to base_url
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response object
        """
        if not self._ensure_token():
            raise requests.exceptions.RequestException("Not authenticated")

        headers = kwargs.pop('headers', {})
        headers['Authorization'] = f"Bearer {self.access_token}"
        kwargs.setdefault('timeout', self.timeout)
        url = f"{self.base_url}{path}"

        if method.upper() == 'GET':
            return self.session.get(url, headers=headers, **kwargs)
        elif method.upper() == 'POST':
            return self.session.post(url, headers=headers, **kwargs)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")

    def get_chain(self, chain: str) -> Optional[Dict]:
        """
        Get the constituents of an option chain.

        Args:
            chain: Chain identifier, e.g. '0#AAPL*.U'

        Returns:
            Raw response body ({'data': {'constituents': [...]}}) or None if failed
        """
        try:
            response = self._make_request('GET', self.CHAIN_URL, params={'universe': chain})
            response.raise_for_status()
            body = response.json()
            constituents = body.get('data', {}).get('constituents', [])
            logger.info(f"Retrieved {len(constituents)} constituent(s) for chain {chain}")
            return body
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to get chain {chain}: {e}")
            return None

    def get_snapshot(self, ric: str, fields: List[str]) -> Optional[Dict]:
        """
        Get a pricing snapshot for a single instrument.

        Args:
            ric: Instrument code, e.g. 'AAPL.O'
            fields: Field names to request, e.g. ['TRDPRC_1', 'HST_CLOSE']

        Returns:
            Dictionary of field values (missing fields map to None) or None if failed
        """
        params = {
            'universe': ric,
            'fields': ','.join(fields)
        }

        try:
            response = self._make_request('GET', self.SNAPSHOT_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to get snapshot for {ric}: {e}")
            return None

        if not data or not isinstance(data, list):
            logger.warning(f"No data in snapshot response for {ric}")
            return None

        snapshot = data[0]
        if snapshot.get('State', {}).get('Stream') == 'Closed' and 'Fields' not in snapshot:
            logger.warning(f"Snapshot for {ric} closed: {snapshot.get('State')}")
            return None

        values = snapshot.get('Fields', {})
        logger.debug(f"Snapshot for {ric}: {values}")
        return {field: values.get(field) for field in fields}

    def price_contracts(self, request: Dict) -> Optional[Dict]:
        """
        Price a batch of financial contracts through IPA.

        Args:
            request: Body with 'fields' and 'universe' entries

        Returns:
            Raw response body ({'headers': [...], 'data': [[...]]}) or None if failed
        """
        try:
            response = self._make_request('POST', self.FINANCIAL_CONTRACTS_URL, json=request)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, 'response', None), 'status_code', None)
            logger.error(f"Financial contracts request failed (status {status}): {e}")
            return None

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()
        self.access_token = None
        self.refresh_token = None
        logger.info("Session closed")
