"""
Tests for the path resolver.
"""

import os
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from modules.file_access.paths import PathResolver, home_from_environment


class TestPathResolver:
    """Test PathResolver class."""

    def test_expands_home_shorthand(self):
        """Test that '~/' is replaced by the home directory."""
        resolver = PathResolver(home_dir="/home/u")

        assert resolver.resolve("~/config.json") == "/home/u" + os.sep + "config.json"

    def test_nested_path_after_shorthand(self):
        resolver = PathResolver(home_dir="/home/u")

        assert resolver.resolve("~/.cursor/mcp.json") == "/home/u" + os.sep + ".cursor/mcp.json"

    def test_absolute_path_unchanged(self):
        """Test that paths without the shorthand are returned as given."""
        resolver = PathResolver(home_dir="/home/u")

        assert resolver.resolve("/abs/path") == "/abs/path"
        assert resolver.resolve("relative/file.txt") == "relative/file.txt"

    def test_other_tilde_forms_unchanged(self):
        """Test that only the '~/' prefix form is recognized."""
        resolver = PathResolver(home_dir="/home/u")

        assert resolver.resolve("~user/file") == "~user/file"
        assert resolver.resolve("~") == "~"
        assert resolver.resolve("a/~/b") == "a/~/b"

    def test_missing_home_leaves_path_unchanged(self):
        """Test that resolution degrades silently without a home directory."""
        resolver = PathResolver(home_provider=lambda: None)

        assert resolver.resolve("~/config.json") == "~/config.json"
        assert resolver.home_dir is None

    def test_empty_home_counts_as_missing(self):
        resolver = PathResolver(home_dir="")

        assert resolver.resolve("~/x") == "~/x"

    def test_provider_queried_on_each_call(self):
        """Test that a home provider is not cached."""
        homes = iter(["/first", "/second"])
        resolver = PathResolver(home_provider=lambda: next(homes))

        assert resolver.resolve("~/a") == "/first" + os.sep + "a"
        assert resolver.resolve("~/a") == "/second" + os.sep + "a"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("HOME", "/env/home")

        resolver = PathResolver.from_environment()

        assert resolver.resolve("~/f") == "/env/home" + os.sep + "f"


class TestHomeFromEnvironment:
    """Test the environment lookup."""

    def test_prefers_home(self):
        env = {"HOME": "/home/u", "USERPROFILE": "C:\\Users\\u"}

        assert home_from_environment(env) == "/home/u"

    def test_falls_back_to_userprofile(self):
        env = {"USERPROFILE": "C:\\Users\\u"}

        assert home_from_environment(env) == "C:\\Users\\u"

    def test_empty_values_ignored(self):
        assert home_from_environment({"HOME": ""}) is None
        assert home_from_environment({}) is None
