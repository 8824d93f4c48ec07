import os
from typing import Dict, Optional, Tuple

from ..interfaces import CredentialStore


class EnvironmentCredentialStore(CredentialStore):
    """
    API keys from explicit overrides or environment variables.

    ``get("AudioWhisper", "OpenAI")`` checks the override map first and then
    ``OPENAI_API_KEY``. Blank values count as missing.
    """

    def __init__(self, overrides: Optional[Dict[Tuple[str, str], str]] = None):
        self._overrides = dict(overrides or {})

    @staticmethod
    def env_var_for(account: str) -> str:
        return f"{account.upper().replace(' ', '_')}_API_KEY"

    def get(self, service: str, account: str) -> Optional[str]:
        secret = self._overrides.get((service, account))
        if secret is None:
            secret = os.environ.get(self.env_var_for(account))
        if secret is None or not secret.strip():
            return None
        return secret.strip()
