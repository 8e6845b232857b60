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
Errors surfaced to the operator by the dispatchers.

Every error carries the exit status the process should terminate with.
The CLI layer prints the message and exits; nothing here is retried.
"""
from typing import List, Sequence


class DeployError(Exception):
    """
    Base class for all operator-facing deployment errors.
    """
    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class ConfigMissing(DeployError):
    """The deployment configuration file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f".env file not found at {path}!\n"
            "Please create a .env file with your configuration.\n"
            "You can copy .env.example if available."
        )


class ConfigUnreadable(DeployError):
    """The deployment configuration file exists but cannot be read as text."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f".env file at {path} could not be read: {reason}\n"
            "Please save it as UTF-8 text."
        )


class ToolMissing(DeployError):
    """A required command line tool is not installed."""

    INSTALL_HINTS = {
        "docker": "https://docs.docker.com/engine/install/",
        "docker compose": "https://docs.docker.com/compose/install/",
    }

    def __init__(self, tool: str):
        self.tool = tool
        hint = self.INSTALL_HINTS.get(tool)
        message = f"{tool} is not available!"
        if hint:
            message += f"\nPlease install it first: {hint}"
        super().__init__(message)


class DaemonUnreachable(DeployError):
    """Neither a plain nor an elevated probe could reach the Docker daemon."""

    def __init__(self, hint: str = ""):
        self.hint = hint
        message = "Cannot access Docker daemon.\nPlease ensure Docker is running and you have permissions."
        if hint:
            message += f"\n\n{hint}"
        super().__init__(message)


class InvalidSelection(DeployError):
    """The operator picked something that is not on the menu."""

    def __init__(self, choice: str, valid: Sequence[str]):
        self.choice = choice
        self.valid: List[str] = list(valid)
        super().__init__(
            f"Invalid choice {choice!r}! Expected one of: {', '.join(self.valid)}"
        )


class SubprocessFailed(DeployError):
    """
    An orchestration command exited with a non-zero status.

    The command's own exit status becomes the dispatcher's exit status.
    """
    def __init__(self, command: Sequence[str], exit_code: int):
        self.command = list(command)
        super().__init__(
            f"Command failed with exit code {exit_code}: {' '.join(self.command)}",
            exit_code=exit_code,
        )
