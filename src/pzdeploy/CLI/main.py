"""
Command Line Interface for PZDeploy.
"""
import click
from ..errors import DeployError
from ..MODELS.settings import DeploySettings
from ..MANAGERS.preflight import PreflightChecker
from ..MANAGERS.menu_dispatcher import print_banner
from ..MANAGERS.lifecycle_dispatcher import LifecycleDispatcher
from ..MANAGERS.build_dispatcher import BuildCacheDispatcher
from ..RUNNERS.command_runner import CommandRunner

def _fail(ctx, error: DeployError):
    """
    Prints the diagnostic and terminates with the error's exit status.
    """
    click.secho(f"❌ Error: {error}", fg="red", err=True)
    ctx.exit(error.exit_code)

@click.command()
@click.pass_context
def deploy(ctx):
    """
    Postiz deployment: build, start, stop, view logs, restart or clean up.

    Checks that Docker, Docker Compose and the .env file are available,
    then asks which action to run against the compose definition.
    """
    try:
        settings = DeploySettings.from_environ()
        runner = CommandRunner(working_dir=settings.project_dir)
        print_banner("Postiz Deployment Script")
        click.echo("")
        result = PreflightChecker(settings, runner).run()
        click.echo("")
        dispatcher = LifecycleDispatcher(
            settings.target(),
            result.docker,
            runner,
            result.config,
            grace_seconds=settings.grace_seconds,
        )
        dispatcher.run()
    except DeployError as e:
        _fail(ctx, e)

@click.command()
@click.pass_context
def build(ctx):
    """
    Build Postiz images with BuildKit layer caching, or prune the build cache.
    """
    try:
        settings = DeploySettings.from_environ()
        runner = CommandRunner(working_dir=settings.project_dir)
        print_banner("Docker Build with Cache Optimization")
        click.echo("")
        result = PreflightChecker(settings, runner).run()
        click.echo("")
        dispatcher = BuildCacheDispatcher(settings.target(), result.docker, runner)
        dispatcher.run()
    except DeployError as e:
        _fail(ctx, e)

def main():
    """
    Entry point for the lifecycle menu.
    """
    deploy(obj={})

def build_main():
    """
    Entry point for the cache-build menu.
    """
    build(obj={})

if __name__ == '__main__':
    main()
