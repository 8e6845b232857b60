"""
Parsers for .env files, supporting quotes, comments and export prefixes.
"""
import io
import os
from typing import Dict
from dotenv import dotenv_values

from ..errors import ConfigMissing, ConfigUnreadable
from ..MODELS.deployment_config import DeploymentConfiguration

class EnvParser:
    """
    Parser for .env files.
    """
    @staticmethod
    def parse(env_path: str) -> Dict[str, str]:
        """
        Parses an .env file from a path.

        Args:
            env_path (str): Path to the .env file.

        Returns:
            Dict[str, str]: Dictionary of environment variables.
        """
        with open(env_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return EnvParser.parse_from_string(content)

    @staticmethod
    def parse_from_string(content: str) -> Dict[str, str]:
        """
        Parses environment variables from a string.
        Keys declared without a value (`KEY` alone) map to an empty string.
        """
        # interpolate=False: the compose tool resolves ${VAR} itself
        parsed = dotenv_values(stream=io.StringIO(content), interpolate=False)
        return {key: value if value is not None else '' for key, value in parsed.items()}

    @staticmethod
    def load(env_path: str) -> DeploymentConfiguration:
        """
        Loads the deployment configuration, failing if the file is absent.

        Args:
            env_path (str): Path to the .env file.

        Raises:
            ConfigMissing: If no file exists at env_path.
            ConfigUnreadable: If the file is not UTF-8 text or cannot be opened.
        """
        if not os.path.isfile(env_path):
            raise ConfigMissing(env_path)
        try:
            values = EnvParser.parse(env_path)
        except UnicodeDecodeError as e:
            raise ConfigUnreadable(env_path, f"invalid UTF-8 byte at position {e.start}") from e
        except OSError as e:
            raise ConfigUnreadable(env_path, e.strerror or str(e)) from e
        return DeploymentConfiguration(source=env_path, values=values)
