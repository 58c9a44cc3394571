"""
Path resolution for fsbridge.

Only the leading ``~/`` shorthand is expanded. ``~user/...`` forms are left
alone, and an undeterminable home directory leaves the path untouched so
that the OS call downstream reports the failure.
"""

import os
from typing import Callable, Mapping, Optional


HOME_SHORTHAND = "~/"
HOME_ENV_VARS = ("HOME", "USERPROFILE")


def home_from_environment(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Look up the current user's home directory in the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        The home directory, or None if no non-empty variable is set
    """
    env = os.environ if environ is None else environ
    for name in HOME_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return None


class PathResolver:
    """Expands the home-directory shorthand using an injected home value."""

    def __init__(
        self,
        home_dir: Optional[str] = None,
        home_provider: Optional[Callable[[], Optional[str]]] = None
    ):
        """
        Initialize PathResolver.

        Args:
            home_dir: Fixed home directory to expand ``~/`` against
            home_provider: Callable queried on every resolution instead of
                a fixed value
        """
        self._home_dir = home_dir
        self._home_provider = home_provider

    @classmethod
    def from_environment(cls) -> "PathResolver":
        """Resolver that reads the home directory from the process environment."""
        return cls(home_provider=home_from_environment)

    @property
    def home_dir(self) -> Optional[str]:
        if self._home_provider is not None:
            return self._home_provider() or None
        return self._home_dir or None

    def resolve(self, raw: str) -> str:
        """
        Resolve a user-supplied path string.

        Args:
            raw: Path as given by the caller

        Returns:
            The path with a leading ``~/`` replaced by the home directory
        """
        if not raw.startswith(HOME_SHORTHAND):
            return raw

        home = self.home_dir
        if home is None:
            return raw

        return home + os.sep + raw[len(HOME_SHORTHAND):]
