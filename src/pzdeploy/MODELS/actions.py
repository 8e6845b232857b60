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
Menus of operator actions and the invocation each one maps to.
"""
from enum import Enum
from typing import Dict, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ConfigDict

from ..errors import InvalidSelection


class CommandScope(str, Enum):
    """
    Whether the arguments go to `docker compose -f <file>` or to plain `docker`.
    """
    COMPOSE = "compose"
    DOCKER = "docker"


class ConfirmationPolicy(str, Enum):
    """
    What the operator must answer around an action.
    """
    NONE = "none"
    # Must type exactly "yes" before the command runs; anything else cancels.
    DESTRUCTIVE = "destructive"
    # After a successful build, offer to start the containers.
    OFFER_START = "offer-start"


class PostCheck(str, Enum):
    """
    What to report after the action's command succeeded.
    """
    NONE = "none"
    STATUS = "status"
    GRACE_THEN_STATUS = "grace-then-status"
    CACHE_STATS = "cache-stats"


class InvocationDescriptor(BaseModel):
    """
    Everything the dispatcher needs to run one menu entry.
    """
    model_config = ConfigDict(frozen=True)

    label: str
    args: Tuple[str, ...]
    scope: CommandScope = CommandScope.COMPOSE
    confirmation: ConfirmationPolicy = ConfirmationPolicy.NONE
    post_check: PostCheck = PostCheck.NONE
    announce: str = ""
    done: str = ""
    note: Optional[str] = None
    # Operator interrupt ends the action normally instead of aborting.
    interruptible: bool = False


class LifecycleAction(str, Enum):
    """
    Entries of the lifecycle menu, keyed by the number the operator types.
    """
    BUILD_AND_START = "1"
    START = "2"
    STOP = "3"
    LOGS = "4"
    RESTART = "5"
    CLEAN_UP = "6"


class BuildAction(str, Enum):
    """
    Entries of the cache-build menu.
    """
    BUILD_CACHED = "1"
    BUILD_CLEAN = "2"
    PRUNE_CACHE = "3"


LIFECYCLE_ACTIONS: Dict[LifecycleAction, InvocationDescriptor] = {
    LifecycleAction.BUILD_AND_START: InvocationDescriptor(
        label="Build and start containers (fresh build)",
        args=("up", "-d", "--build"),
        post_check=PostCheck.GRACE_THEN_STATUS,
        announce="🔨 Building and starting Postiz...",
        done="✅ Build complete! Waiting for services to be healthy...",
    ),
    LifecycleAction.START: InvocationDescriptor(
        label="Start containers (use existing build)",
        args=("up", "-d"),
        post_check=PostCheck.STATUS,
        announce="▶️  Starting Postiz containers...",
        done="✅ Containers started!",
    ),
    LifecycleAction.STOP: InvocationDescriptor(
        label="Stop containers",
        args=("down",),
        announce="⏹️  Stopping Postiz containers...",
        done="✅ Containers stopped!",
    ),
    LifecycleAction.LOGS: InvocationDescriptor(
        label="View logs",
        args=("logs", "-f"),
        announce="📋 Showing logs (Ctrl+C to exit)...",
        interruptible=True,
    ),
    LifecycleAction.RESTART: InvocationDescriptor(
        label="Restart containers",
        args=("restart",),
        announce="🔄 Restarting Postiz containers...",
        done="✅ Containers restarted!",
    ),
    LifecycleAction.CLEAN_UP: InvocationDescriptor(
        label="Clean up (stop and remove containers, volumes)",
        args=("down", "-v"),
        confirmation=ConfirmationPolicy.DESTRUCTIVE,
        announce="🧹 Cleaning up...",
        done="✅ Cleanup complete!",
        note="⚠️  This will remove all containers and volumes. Are you sure?",
    ),
}

BUILD_ACTIONS: Dict[BuildAction, InvocationDescriptor] = {
    BuildAction.BUILD_CACHED: InvocationDescriptor(
        label="Build with cache (recommended)",
        args=("build", "--progress=plain"),
        confirmation=ConfirmationPolicy.OFFER_START,
        announce="🔨 Building with cache optimization...",
        note="This will reuse cached layers from previous builds.",
        done="✅ Build complete!",
    ),
    BuildAction.BUILD_CLEAN: InvocationDescriptor(
        label="Build without cache (clean build)",
        args=("build", "--no-cache", "--progress=plain"),
        confirmation=ConfirmationPolicy.OFFER_START,
        announce="🧹 Building without cache (clean build)...",
        note="⚠️  This will take longer but ensures a fresh build.",
        done="✅ Clean build complete!",
    ),
    BuildAction.PRUNE_CACHE: InvocationDescriptor(
        label="Prune build cache",
        args=("builder", "prune", "-af"),
        scope=CommandScope.DOCKER,
        post_check=PostCheck.CACHE_STATS,
        announce="🗑️  Pruning build cache...",
        done="✅ Build cache cleared!",
    ),
}

E = TypeVar("E", bound=Enum)


def parse_selection(choice: str, menu: Type[E]) -> E:
    """
    Maps raw operator input onto a menu entry.

    :param choice: What the operator typed.
    :param menu: The enum of valid entries.
    :return: The matching entry.
    :raises InvalidSelection: If the input is not one of the entry numbers.
    """
    try:
        return menu(choice.strip())
    except ValueError:
        raise InvalidSelection(choice, [m.value for m in menu]) from None
