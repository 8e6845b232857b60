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
Blocking execution of orchestration commands in the foreground.
"""
import os
import subprocess
from typing import Dict, List, Optional

import click


def _normalize_exit_code(code: int) -> int:
    """
    Maps a Popen return code onto a shell-style exit status
    (killed by signal N becomes 128+N).
    """
    if code < 0:
        return 128 + abs(code)
    return code


class CommandRunner:
    """
    Runs commands synchronously with the operator's terminal attached.
    """
    def __init__(self, working_dir: Optional[str] = None, echo: bool = True):
        """
        Initializes the command runner.

        Args:
            working_dir (Optional[str]): Directory the commands run in.
            echo (bool): Print each command line before running it.
        """
        self.working_dir = working_dir
        self.echo = echo

    def _environment(self, extra_env: Optional[Dict[str, str]]) -> Dict[str, str]:
        env = os.environ.copy()
        if extra_env:
            env.update(extra_env)
        return env

    def run(self, command: List[str], extra_env: Optional[Dict[str, str]] = None) -> int:
        """
        Runs a command, streaming its output, and waits for it to finish.

        If the operator interrupts (Ctrl+C), the child receives the same
        signal from the terminal; we wait for it to exit and re-raise.

        Args:
            command (List[str]): Command and arguments to execute.
            extra_env (Optional[Dict[str, str]]): Variables added to the inherited environment.

        Returns:
            int: The command's exit status.
        """
        if self.echo:
            click.secho(f"$ {' '.join(command)}", dim=True)

        try:
            process = subprocess.Popen(
                command,
                env=self._environment(extra_env),
                cwd=self.working_dir,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except FileNotFoundError:
            click.secho(f"Command not found: {command[0]}", fg="red", err=True)
            return 127

        try:
            return _normalize_exit_code(process.wait())
        except KeyboardInterrupt:
            process.wait()
            raise

    def probe(self, command: List[str], timeout: Optional[float] = 10.0) -> bool:
        """
        Runs a check command quietly.

        Args:
            command (List[str]): Command and arguments to execute.
            timeout (Optional[float]): Seconds before the check counts as failed, None to wait indefinitely.

        Returns:
            bool: True if the command exited with status 0.
        """
        try:
            result = subprocess.run(
                command,
                cwd=self.working_dir,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=timeout,
                shell=False,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
        return result.returncode == 0
