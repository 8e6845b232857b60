"""
Models for the deployment configuration loaded from the .env file.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

# Keys without which a Postiz stack will not come up correctly.
CRITICAL_KEYS = [
    "MAIN_URL",
    "FRONTEND_URL",
    "NEXT_PUBLIC_BACKEND_URL",
    "JWT_SECRET",
    "DATABASE_URL",
    "REDIS_URL",
    "STORAGE_PROVIDER",
]

class DeploymentConfiguration(BaseModel):
    """
    Flat mapping of environment variable names to values.
    Loaded once at startup and never modified afterwards.
    """
    model_config = ConfigDict(frozen=True)

    source: str
    values: Dict[str, str] = {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Returns the value for a key, or default if it is unset.
        """
        return self.values.get(key, default)

    def as_dict(self) -> Dict[str, str]:
        """
        Returns a copy of the variables, safe to hand to a subprocess environment.
        """
        return dict(self.values)

    def critical_keys_missing(self) -> List[str]:
        """
        Lists the critical keys that are absent or empty, in declaration order.
        """
        return [key for key in CRITICAL_KEYS if not self.values.get(key)]

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, key: object) -> bool:
        return key in self.values
