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
Shared machinery for numbered, interactive action menus.
"""
from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

import click

from ..errors import SubprocessFailed
from ..MODELS.actions import CommandScope, InvocationDescriptor, parse_selection
from ..MODELS.orchestration_target import DockerCommand, OrchestrationTarget
from ..RUNNERS.command_runner import CommandRunner

A = TypeVar("A")

# Only this exact answer confirms a question.
AFFIRMATIVE = "yes"


def ask(question: str) -> str:
    """
    Reads one line from the operator, trimmed of surrounding whitespace.
    An empty line is returned as "".
    """
    answer = click.prompt(question, default="", show_default=False, prompt_suffix=" ")
    return answer.strip()


def confirmed(answer: str) -> bool:
    """True only for the exact affirmative answer."""
    return answer == AFFIRMATIVE


def print_banner(text: str):
    click.echo("=" * 38)
    click.echo(text)
    click.echo("=" * 38)


class MenuDispatcher(Generic[A]):
    """
    Presents a closed menu, reads one selection and runs the mapped command.
    """
    menu_heading = "What would you like to do?"

    def __init__(self,
                 menu: Type[A],
                 actions: Dict[A, InvocationDescriptor],
                 target: OrchestrationTarget,
                 docker: DockerCommand,
                 runner: CommandRunner,
                 prompt: Callable[[str], str] = ask):
        """
        :param menu: Enum of the menu entries.
        :param actions: Descriptor for every entry of the menu.
        :param target: Compose definition the commands apply to.
        :param docker: Resolved Docker prefix from preflight.
        :param runner: Runner for the commands.
        :param prompt: Reads an answer from the operator.
        """
        self.menu = menu
        self.actions = actions
        self.target = target
        self.docker = docker
        self.runner = runner
        self.prompt = prompt

    def show_menu(self):
        click.echo(self.menu_heading)
        for entry in self.menu:
            click.echo(f"{entry.value}) {self.actions[entry].label}")
        click.echo("")

    def select(self) -> A:
        """
        Reads the operator's choice.

        :raises InvalidSelection: If the answer is not a menu number.
        """
        numbers = [entry.value for entry in self.menu]
        choice = self.prompt(f"Enter your choice ({numbers[0]}-{numbers[-1]}):")
        return parse_selection(choice, self.menu)

    def command_for(self, descriptor: InvocationDescriptor) -> List[str]:
        """Builds the full command line for a descriptor."""
        if descriptor.scope == CommandScope.DOCKER:
            return self.docker.docker(*descriptor.args)
        return self.docker.compose(self.target, *descriptor.args)

    def invoke(self, command: List[str], extra_env: Optional[Dict[str, str]] = None):
        """
        Runs a command in the foreground.

        :raises SubprocessFailed: If it exits non-zero.
        """
        code = self.runner.run(command, extra_env=extra_env)
        if code != 0:
            raise SubprocessFailed(command, code)

    def report(self, command: List[str], extra_env: Optional[Dict[str, str]] = None):
        """
        Runs an informational command. A failure is reported, never raised.
        """
        code = self.runner.run(command, extra_env=extra_env)
        if code != 0:
            click.secho(f"⚠️  {' '.join(command)} exited with {code}", fg="yellow", err=True)

    def run(self):
        """
        Shows the menu, reads one selection and dispatches it.

        :raises DeployError: On an invalid selection or failed command.
        """
        self.show_menu()
        action = self.select()
        self.dispatch(action)

    def dispatch(self, action: A):
        raise NotImplementedError
