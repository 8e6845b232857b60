"""
Launch-time settings for the dispatchers.
"""
import os
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import DeployError
from .orchestration_target import OrchestrationTarget

ENV_PREFIX = "PZDEPLOY_"

class DeploySettings(BaseModel):
    """
    Where the stack lives and how long to wait on it.
    Read from PZDEPLOY_* environment variables when the process starts.
    """
    model_config = ConfigDict(frozen=True)

    project_dir: str = "."
    compose_file: str = "docker-compose.prod.yaml"
    env_file: str = ".env"
    grace_seconds: float = Field(default=10.0, ge=0)
    probe_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "DeploySettings":
        """
        Builds settings from PZDEPLOY_* variables, falling back to defaults.

        :param environ: Mapping to read from, defaults to os.environ.
        :raises DeployError: If a variable holds an invalid value.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw:
                values[name] = raw
        try:
            return cls(**values)
        except ValidationError as e:
            raise DeployError(f"Invalid {ENV_PREFIX}* setting:\n{e}") from e

    @property
    def env_path(self) -> str:
        """Absolute path of the deployment configuration file."""
        return os.path.abspath(os.path.join(self.project_dir, self.env_file))

    def target(self) -> OrchestrationTarget:
        """The compose definition this run drives."""
        return OrchestrationTarget(project_dir=self.project_dir, compose_file=self.compose_file)
