"""
Utilities for string interpolation using environment variables.
"""
import re
from typing import Dict

# Pattern: ${VAR:-default} or ${VAR:+value} or ${VAR} or $VAR
# Group 1: VAR name (braced), group 2: - or +, group 3: default or value
# Group 4: VAR name (bare)
_PATTERN = re.compile(r'\$\{([^}:]+)(?::(-|\+)([^}]*))?\}|\$([A-Za-z_][A-Za-z0-9_]*)')

class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in strings.
    Supports ${VAR}, ${VAR:-default}, ${VAR:+value}, $VAR and $$ escapes.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str], strict: bool = False) -> str:
        """
        Interpolates environment variables in the template string using the provided context.

        :param template: The string containing ${VAR} placeholders.
        :param context: The environment variables context.
        :param strict: Raise for unset variables instead of substituting an empty string.
        :return: The interpolated string.
        :raises KeyError: If strict and a variable is not found with no default provided.
        """
        def replace(match):
            var_name = match.group(1) or match.group(4)
            modifier = match.group(2)
            alt_value = match.group(3)

            value = context.get(var_name)

            if modifier == '-':
                return value if value else alt_value
            if modifier == '+':
                return alt_value if value else ''
            if value is not None:
                return value
            if strict:
                raise KeyError(f"Variable {var_name} not found in context")
            # Compose substitutes an empty string for unset variables
            return ''

        # $$ is a literal dollar sign
        parts = template.split('$$')
        return '$'.join(_PATTERN.sub(replace, part) for part in parts)
