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
Read-only inspection of Docker Compose YAML files.

The dispatcher never rewrites the compose definition; it only looks at it
to name services and to work out which host port the stack publishes.
"""
import os
from typing import Any, Dict, List, Optional
import yaml
from pydantic import BaseModel

from ..UTILS.string_interpolation import EnvironmentInterpolator


class ComposeSummary(BaseModel):
    """
    The parts of a compose definition the dispatcher reports on.
    """
    services: List[str] = []
    # {service: [host ports]}
    published_ports: Dict[str, List[int]] = {}

    def first_published_port(self) -> Optional[int]:
        """
        First host port published by any service, in declaration order.
        """
        for ports in self.published_ports.values():
            if ports:
                return ports[0]
        return None


class ComposeParser:
    """
    Parser for docker-compose files.

    Like Compose itself, the YAML is parsed first and ${VAR} references are
    substituted in the parsed values afterwards, so variable values never
    change the document's structure.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: Variables used for ${VAR} substitution, defaults to os.environ.
        """
        self.context = dict(os.environ) if context is None else context

    def parse(self, compose_path: str) -> ComposeSummary:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file.
        :return: Parsed summary.
        """
        with open(compose_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ComposeSummary:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :return: Parsed summary.
        :raises yaml.YAMLError: If the content is not valid YAML.
        """
        data = yaml.safe_load(content)
        if not isinstance(data, dict):
            data = {}

        services = data.get('services') or {}
        if not isinstance(services, dict):
            services = {}

        published = {}
        for name, spec in services.items():
            spec = spec if isinstance(spec, dict) else {}
            ports = spec.get('ports') or []
            published[str(name)] = self._host_ports(ports if isinstance(ports, list) else [])

        return ComposeSummary(
            services=[str(name) for name in services],
            published_ports=published,
        )

    def _interpolate(self, value: Any) -> str:
        return EnvironmentInterpolator.interpolate(str(value), self.context)

    def _host_ports(self, ports: List[Any]) -> List[int]:
        """
        Extracts published host ports from a service's `ports` list.

        Handles short syntax ("5000:5000", "127.0.0.1:5000:5000", "5000:5000/tcp")
        and long syntax ({target: 5000, published: 5000}). Container-only
        entries publish nothing and are skipped.
        """
        host_ports = []
        for p in ports:
            if isinstance(p, dict):
                published = p.get('published')
                if published is None:
                    continue
                published = self._interpolate(published)
                if published.isdigit():
                    host_ports.append(int(published))
                continue
            entry = self._interpolate(p).split('/')[0]
            parts = entry.split(':')
            if len(parts) < 2:
                continue
            host = parts[-2]
            # Ranges ("5000-5002") publish their first port first
            host = host.split('-')[0]
            if host.isdigit():
                host_ports.append(int(host))
        return host_ports
