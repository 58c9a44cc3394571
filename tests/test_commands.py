"""
Tests for the command boundary.
"""

import asyncio
import json
import pytest
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from modules.file_access import FileAccess, PathResolver, COMMAND_NAMES, dispatch, dispatch_async


@pytest.fixture
def access(tmp_path):
    return FileAccess(resolver=PathResolver(home_dir=str(tmp_path)))


class TestDispatch:
    """Test dispatch()."""

    def test_all_host_commands_registered(self):
        for name in [
            "file_exists", "file_dir_exists", "file_read", "file_read_bytes",
            "file_write", "file_write_bytes", "file_append", "file_create_dir",
            "file_delete", "file_copy", "file_move", "file_size", "file_modified",
            "file_list_dir", "file_read_json", "file_write_json",
            "get_user_home_dir", "read_file_content", "check_file_exists",
        ]:
            assert name in COMMAND_NAMES

    def test_write_then_read(self, access):
        result = dispatch(access, "file_write", {"path": "~/a.txt", "content": "hello"})

        assert result.success
        assert result.data is None

        result = dispatch(access, "file_read", {"path": "~/a.txt"})

        assert result.success
        assert result.data == "hello"

    def test_error_flattened_to_message(self, access, tmp_path):
        """Test that failures cross the boundary as a single string."""
        result = dispatch(access, "file_read", {"path": "~/missing.txt"})

        assert not result.success
        assert isinstance(result.error, str)
        assert "missing.txt" in result.error
        assert result.error_kind == "ReadError"
        assert result.to_dict() == {"ok": False, "error": result.error}

    def test_parse_error_kind(self, access, tmp_path):
        (tmp_path / "bad.json").write_text("{")

        result = dispatch(access, "file_read_json", {"path": "~/bad.json"})

        assert result.error_kind == "ParseError"

    def test_exists_never_fails(self, access):
        result = dispatch(access, "file_exists", {"path": "~/nothing"})

        assert result.success
        assert result.data is False

    def test_bytes_as_list_of_ints(self, access):
        result = dispatch(access, "file_write_bytes", {"path": "~/b.bin", "content": [0, 1, 255]})
        assert result.success

        result = dispatch(access, "file_read_bytes", {"path": "~/b.bin"})

        assert result.data == [0, 1, 255]
        json.dumps(result.to_dict())

    def test_bytes_out_of_range(self, access):
        result = dispatch(access, "file_write_bytes", {"path": "~/b.bin", "content": [256]})

        assert not result.success
        assert result.error_kind == "InvalidArguments"

    def test_string_not_accepted_as_bytes(self, access):
        result = dispatch(access, "file_write_bytes", {"path": "~/b.bin", "content": "text"})

        assert not result.success

    def test_json_round_trip(self, access):
        data = {"mcpServers": {"fs": {"command": "npx", "args": ["-y"]}}}

        assert dispatch(access, "file_write_json", {"path": "~/c.json", "data": data}).success

        result = dispatch(access, "file_read_json", {"path": "~/c.json"})

        assert result.data == data

    def test_copy_and_move_use_from_to(self, access, tmp_path):
        dispatch(access, "file_write", {"path": "~/a.txt", "content": "12345"})

        copied = dispatch(access, "file_copy", {"from": "~/a.txt", "to": "~/b.txt"})
        moved = dispatch(access, "file_move", {"from": "~/b.txt", "to": "~/c.txt"})

        assert copied.data == 5
        assert moved.success
        assert (tmp_path / "c.txt").read_text() == "12345"

    def test_modified_is_iso_string(self, access):
        dispatch(access, "file_write", {"path": "~/m.txt", "content": "x"})

        result = dispatch(access, "file_modified", {"path": "~/m.txt"})

        assert isinstance(result.data, str)
        assert "T" in result.data

    def test_file_info_is_mapping(self, access):
        dispatch(access, "file_write", {"path": "~/i.txt", "content": "abc"})

        result = dispatch(access, "file_info", {"path": "~/i.txt"})

        assert result.data["size"] == 3
        assert result.data["is_file"] is True

    def test_list_dir(self, access):
        dispatch(access, "file_create_dir", {"path": "~/d/e"})

        result = dispatch(access, "file_list_dir", {"path": "~/d"})

        assert result.data == ["e"]

    def test_home_dir(self, access, tmp_path):
        assert dispatch(access, "get_user_home_dir").data == str(tmp_path)

    def test_home_dir_unknown(self):
        access = FileAccess(resolver=PathResolver(home_provider=lambda: None))

        result = dispatch(access, "get_user_home_dir")

        assert not result.success
        assert result.error_kind == "ReadError"

    def test_legacy_aliases(self, access):
        dispatch(access, "file_write", {"path": "~/l.txt", "content": "legacy"})

        assert dispatch(access, "read_file_content", {"path": "~/l.txt"}).data == "legacy"
        assert dispatch(access, "check_file_exists", {"path": "~/l.txt"}).data is True
        assert dispatch(access, "check_file_exists", {"path": "~"}).data is False

    def test_unknown_command(self, access):
        result = dispatch(access, "scan_local_tools")

        assert not result.success
        assert "scan_local_tools" in result.error

    def test_missing_arguments(self, access):
        result = dispatch(access, "file_write", {"path": "~/x"})

        assert not result.success
        assert result.error_kind == "InvalidArguments"

    def test_missing_copy_arguments(self, access):
        result = dispatch(access, "file_copy", {"from": "~/x"})

        assert result.error_kind == "InvalidArguments"

    def test_non_string_path(self, access):
        """Test that a non-string path is reported, not raised."""
        result = dispatch(access, "file_read", {"path": None})

        assert not result.success
        assert result.error_kind == "InvalidArguments"
        assert "path" in result.error

    def test_non_string_content(self, access, tmp_path):
        result = dispatch(access, "file_write", {"path": "~/x.txt", "content": 123})

        assert result.error_kind == "InvalidArguments"
        assert not (tmp_path / "x.txt").exists()

    def test_non_string_copy_target(self, access):
        dispatch(access, "file_write", {"path": "~/a.txt", "content": "x"})

        result = dispatch(access, "file_copy", {"from": "~/a.txt", "to": ["b"]})

        assert result.error_kind == "InvalidArguments"

    def test_integer_not_accepted_as_bytes(self, access, tmp_path):
        """Test that an integer is not turned into a run of zero bytes."""
        result = dispatch(access, "file_write_bytes", {"path": "~/b.bin", "content": 5})

        assert not result.success
        assert result.error_kind == "InvalidArguments"
        assert not (tmp_path / "b.bin").exists()

    def test_arguments_must_be_mapping(self, access):
        result = dispatch(access, "file_read", ["~/a.txt"])

        assert result.error_kind == "InvalidArguments"


class TestDispatchAsync:
    """Test dispatch_async()."""

    def test_runs_on_worker(self, access):
        async def run():
            await dispatch_async(access, "file_write", {"path": "~/async.txt", "content": "ok"})
            return await dispatch_async(access, "file_read", {"path": "~/async.txt"})

        result = asyncio.run(run())

        assert result.data == "ok"

    def test_independent_invocations(self, access):
        async def run():
            return await asyncio.gather(*[
                dispatch_async(access, "file_write", {"path": f"~/f{i}.txt", "content": str(i)})
                for i in range(5)
            ])

        results = asyncio.run(run())

        assert all(r.success for r in results)
        assert sorted(dispatch(access, "file_list_dir", {"path": "~/"}).data) == [
            f"f{i}.txt" for i in range(5)
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
