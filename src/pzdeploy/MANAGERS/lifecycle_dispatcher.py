"""
The lifecycle menu: build, start, stop, logs, restart and clean-up.
"""
import os
import time
from typing import Callable, Optional

import click
import yaml

from ..MODELS.actions import (
    LIFECYCLE_ACTIONS,
    ConfirmationPolicy,
    LifecycleAction,
    PostCheck,
)
from ..MODELS.deployment_config import DeploymentConfiguration
from ..MODELS.orchestration_target import DockerCommand, OrchestrationTarget
from ..PARSERS.compose_parser import ComposeParser, ComposeSummary
from ..RUNNERS.command_runner import CommandRunner
from .menu_dispatcher import MenuDispatcher, ask, confirmed

DEFAULT_PORT = 5000

class LifecycleDispatcher(MenuDispatcher[LifecycleAction]):
    """
    Drives the deployed stack through `docker compose`.
    """

    def __init__(self,
                 target: OrchestrationTarget,
                 docker: DockerCommand,
                 runner: CommandRunner,
                 config: DeploymentConfiguration,
                 grace_seconds: float = 10.0,
                 prompt: Callable[[str], str] = ask,
                 sleep: Callable[[float], None] = time.sleep):
        super().__init__(LifecycleAction, LIFECYCLE_ACTIONS, target, docker, runner, prompt)
        self.config = config
        self.grace_seconds = grace_seconds
        self.sleep = sleep

    def dispatch(self, action: LifecycleAction):
        """
        Runs one lifecycle action to completion.

        :raises SubprocessFailed: If the action's command fails.
        """
        descriptor = self.actions[action]
        command = self.command_for(descriptor)
        click.echo("")

        if descriptor.confirmation == ConfirmationPolicy.DESTRUCTIVE:
            answer = self.prompt(f"{descriptor.note} (yes/no):")
            if not confirmed(answer):
                click.echo("Cancelled.")
                return

        click.echo(descriptor.announce)

        if descriptor.interruptible:
            try:
                self.invoke(command)
            except KeyboardInterrupt:
                click.echo("\nStopped following logs.")
            return

        self.invoke(command)

        if descriptor.post_check == PostCheck.GRACE_THEN_STATUS:
            click.echo("")
            click.echo(descriptor.done)
            self.sleep(self.grace_seconds)
            self.report(self.docker.compose(self.target, "ps"))
            self._print_access_info()
        elif descriptor.post_check == PostCheck.STATUS:
            click.echo("")
            click.echo(descriptor.done)
            self.report(self.docker.compose(self.target, "ps"))
        elif descriptor.done:
            click.echo(descriptor.done)

    def access_url(self, summary: Optional[ComposeSummary] = None) -> str:
        """
        Where the operator can reach the app: FRONTEND_URL if configured,
        else the first host port the compose file publishes.
        """
        url = self.config.get("FRONTEND_URL")
        if url:
            return url
        if summary is None:
            summary = self.compose_summary()
        port = summary.first_published_port() if summary else None
        return f"http://localhost:{port or DEFAULT_PORT}"

    def compose_summary(self) -> Optional[ComposeSummary]:
        """
        Reads the compose definition, or None if it cannot be read.
        Only used for the messages printed after a build.
        """
        context = dict(os.environ)
        context.update(self.config.as_dict())
        try:
            return ComposeParser(context).parse(self.target.compose_path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return None

    def _print_access_info(self):
        summary = self.compose_summary()
        logs_command = " ".join(self.docker.compose(self.target, "logs", "-f"))
        click.echo("")
        click.echo("🎉 Postiz is now running!")
        if summary and summary.services:
            click.echo(f"🧩 Services: {', '.join(summary.services)}")
        click.echo(f"📍 Access it at: {self.access_url(summary)}")
        click.echo(f"📝 View logs: {logs_command}")
