"""
The cache-build menu: BuildKit builds with or without layer cache, and cache pruning.
"""
from typing import Callable, Dict

import click

from ..MODELS.actions import BUILD_ACTIONS, BuildAction, CommandScope, ConfirmationPolicy, PostCheck
from ..MODELS.orchestration_target import DockerCommand, OrchestrationTarget
from ..RUNNERS.command_runner import CommandRunner
from .menu_dispatcher import MenuDispatcher, ask, confirmed, print_banner

BUILDKIT_ENV: Dict[str, str] = {
    "DOCKER_BUILDKIT": "1",
    "COMPOSE_DOCKER_CLI_BUILD": "1",
}

BUILD_TIPS = [
    "First build will be slow (5-10 min)",
    "Subsequent builds reuse cache (1-3 min)",
    "Only changed layers are rebuilt",
    "pnpm dependencies are cached separately",
]

class BuildCacheDispatcher(MenuDispatcher[BuildAction]):
    """
    Builds images with BuildKit layer caching enabled.
    """
    menu_heading = "Build options:"

    def __init__(self,
                 target: OrchestrationTarget,
                 docker: DockerCommand,
                 runner: CommandRunner,
                 prompt: Callable[[str], str] = ask):
        super().__init__(BuildAction, BUILD_ACTIONS, target, docker, runner, prompt)

    def run(self):
        click.echo("✅ BuildKit enabled for faster builds and better caching")
        click.echo("")
        super().run()
        self.show_cache_info()

    def dispatch(self, action: BuildAction):
        """
        Runs one build action, plus its follow-up.

        :raises SubprocessFailed: If the build, prune or follow-up start fails.
        """
        descriptor = self.actions[action]
        click.echo("")
        click.echo(descriptor.announce)
        if descriptor.note:
            click.echo(descriptor.note)
            click.echo("")

        self.invoke(self.command_for(descriptor), extra_env=BUILDKIT_ENV)

        if descriptor.scope == CommandScope.COMPOSE:
            click.echo("")
        click.echo(descriptor.done)

        if descriptor.confirmation == ConfirmationPolicy.OFFER_START:
            click.echo("")
            if confirmed(self.prompt("Start containers now? (yes/no):")):
                self.invoke(self.docker.compose(self.target, "up", "-d"), extra_env=BUILDKIT_ENV)
                click.echo("✅ Containers started!")

        if descriptor.post_check == PostCheck.CACHE_STATS:
            click.echo("")
            click.echo("Cache statistics:")
            self.report(self.docker.docker("system", "df"))

    def show_cache_info(self):
        """Prints disk usage of images, containers and build cache, then tips."""
        click.echo("")
        print_banner("Cache Information")
        self.report(self.docker.docker("system", "df"))
        click.echo("")
        click.echo("💡 Tips:")
        for tip in BUILD_TIPS:
            click.echo(f"- {tip}")
