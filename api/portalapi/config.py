"""
Portal Configuration

Environment-based configuration for the campaign portal client
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class PortalConfig:
    """Portal client configuration settings"""

    def __init__(self):
        # Connection
        self.BASE_URL = os.getenv('BASE_URL', '').strip()
        self.REQUEST_TIMEOUT = float(os.getenv('PORTAL_REQUEST_TIMEOUT', 5))

        # Credentials
        self.API_USERNAME = os.getenv('API_USERNAME', '')
        self.API_PASSWORD = os.getenv('API_PASSWORD', '')
        self.ACCOUNT_ID_HEADER: Optional[str] = os.getenv('ACCOUNT_ID_HEADER') or None

        # Verbose login diagnostics
        self.DEBUG = _env_flag('DEBUG')

        # Off unless explicitly requested; lab portals use self-signed certs
        self.INSECURE_SKIP_VERIFY = _env_flag('PORTAL_INSECURE_SKIP_VERIFY')

        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    @property
    def verify_ssl(self) -> bool:
        return not self.INSECURE_SKIP_VERIFY

    def missing_settings(self) -> List[str]:
        required = {
            'BASE_URL': self.BASE_URL,
            'API_USERNAME': self.API_USERNAME,
            'API_PASSWORD': self.API_PASSWORD,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> "PortalConfig":
        missing = self.missing_settings()
        if missing:
            raise ValueError(f"Missing portal configuration: {', '.join(missing)}")
        return self
