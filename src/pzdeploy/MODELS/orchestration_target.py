"""
Models for the compose definition and Docker invocation prefix an action applies to.
"""
import os
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict


class OrchestrationTarget(BaseModel):
    """
    Which compose definition file the dispatcher drives.
    Fixed when the process starts.
    """
    model_config = ConfigDict(frozen=True)

    project_dir: str = "."
    compose_file: str = "docker-compose.prod.yaml"

    @property
    def compose_path(self) -> str:
        """Absolute path of the compose definition file."""
        return os.path.abspath(os.path.join(self.project_dir, self.compose_file))


class DockerCommand(BaseModel):
    """
    The resolved way of calling the Docker CLI for this run.

    Computed once during preflight and passed to every invocation, so a
    run that needed `sudo` for the probe uses it everywhere.
    """
    model_config = ConfigDict(frozen=True)

    prefix: Tuple[str, ...] = ("docker",)

    @property
    def elevated(self) -> bool:
        """True when invocations go through sudo."""
        return self.prefix[:1] == ("sudo",)

    def docker(self, *args: str) -> List[str]:
        """Builds a plain `docker ...` command line."""
        return [*self.prefix, *args]

    def compose(self, target: OrchestrationTarget, *args: str) -> List[str]:
        """Builds a `docker compose -f <file> ...` command line for the target."""
        return [*self.prefix, "compose", "-f", target.compose_file, *args]

    def display(self) -> str:
        """Human-readable form, used in hints printed to the operator."""
        return " ".join(self.prefix)
