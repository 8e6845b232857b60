# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Precondition checks run before any menu is shown.

Order matters: the configuration file is checked first, and the engine is
located on PATH, before any subprocess is started. Only then is the daemon
probed and the compose plugin checked, both with the resolved prefix.
"""
import platform
import shutil
from typing import Callable, Optional

import click
from pydantic import BaseModel, ConfigDict

from ..errors import DaemonUnreachable, ToolMissing
from ..MODELS.deployment_config import DeploymentConfiguration
from ..MODELS.orchestration_target import DockerCommand
from ..MODELS.settings import DeploySettings
from ..PARSERS.env_parser import EnvParser
from ..RUNNERS.command_runner import CommandRunner


class PreflightResult(BaseModel):
    """
    What the checks established for the rest of the run.
    """
    model_config = ConfigDict(frozen=True)

    config: DeploymentConfiguration
    docker: DockerCommand


def daemon_hint() -> str:
    """
    Platform-specific advice for getting the Docker daemon running.
    """
    system = platform.system()
    if system in ("Darwin", "Windows"):
        return (
            "Docker Desktop is not running.\n"
            "Start Docker Desktop, wait for it to finish starting, then try again."
        )
    return (
        "To fix this:\n"
        "1. Start Docker: sudo systemctl start docker\n"
        "2. Check status: sudo systemctl status docker\n"
        "If permission issues, add your user to the docker group:\n"
        "sudo usermod -aG docker $USER (then log out and back in)"
    )


class PreflightChecker:
    """
    Validates that the host can run the stack and resolves how to call Docker.
    """
    def __init__(self,
                 settings: DeploySettings,
                 runner: CommandRunner,
                 which: Optional[Callable[[str], Optional[str]]] = None):
        """
        :param settings: Launch settings (paths and probe timeout).
        :param runner: Runner used for the probe commands.
        :param which: PATH lookup, defaults to shutil.which.
        """
        self.settings = settings
        self.runner = runner
        self.which = which or shutil.which

    def run(self) -> PreflightResult:
        """
        Runs every check, printing a status line for each one that passes.

        :raises ConfigMissing: If the .env file is absent.
        :raises ConfigUnreadable: If the .env file is not readable UTF-8 text.
        :raises ToolMissing: If docker or the compose plugin is unavailable.
        :raises DaemonUnreachable: If the daemon cannot be reached even with sudo.
        """
        config = self.check_config()
        click.echo("✅ Found .env file")

        missing = config.critical_keys_missing()
        if missing:
            click.secho(
                f"⚠️  Not set in {self.settings.env_file}: {', '.join(missing)}",
                fg="yellow",
            )

        self.check_engine()
        click.echo("✅ Docker is installed")

        docker = self.resolve_daemon()
        if docker.elevated:
            click.echo("ℹ️  Docker requires sudo privileges")

        self.check_compose(docker)
        click.echo("✅ Docker Compose is available")

        return PreflightResult(config=config, docker=docker)

    def check_config(self) -> DeploymentConfiguration:
        """Loads the configuration file; raises ConfigMissing if absent."""
        return EnvParser.load(self.settings.env_path)

    def check_engine(self):
        """Raises ToolMissing if the docker CLI is not on PATH."""
        if not self.which("docker"):
            raise ToolMissing("docker")

    def resolve_daemon(self) -> DockerCommand:
        """
        Probes the daemon, first directly and then through sudo.

        :return: The prefix every later invocation must use.
        """
        plain = DockerCommand()
        if self.runner.probe(plain.docker("ps"), timeout=self.settings.probe_timeout):
            return plain

        elevated = DockerCommand(prefix=("sudo", "docker"))
        if self.which("sudo") and self.runner.probe(elevated.docker("ps"), timeout=None):
            return elevated

        raise DaemonUnreachable(daemon_hint())

    def check_compose(self, docker: DockerCommand):
        """Raises ToolMissing if `docker compose` does not respond."""
        if not self.runner.probe(docker.docker("compose", "version"), timeout=self.settings.probe_timeout):
            raise ToolMissing("docker compose")
