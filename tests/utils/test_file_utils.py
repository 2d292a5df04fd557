# Copyright (c) 2025, NVIDIA CORPORATION.  All rights reserved.
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

from __future__ import annotations

import gzip
import os
import stat
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from assets_packager.utils.file_utils import (
    get_all_file_paths_under,
    gzip_text,
    make_dir,
    read_text,
    read_text_async,
    write_text,
    write_text_async,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_test_file(path: Path, content: str = "test") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestMakeDir:
    """Test cases for make_dir."""

    def test_creates_every_segment(self, tmp_path: Path):
        target = tmp_path / "public" / "stylesheets" / "bundled"
        make_dir(str(tmp_path), str(target))

        assert target.is_dir()
        if os.name == "posix":
            # the process umask may only narrow the requested mode
            assert stat.S_IMODE(target.stat().st_mode) & ~0o775 == 0

    def test_existing_directories_are_kept(self, tmp_path: Path):
        _write_test_file(tmp_path / "public" / "keep.txt", "keep")
        make_dir(str(tmp_path), str(tmp_path / "public" / "bundled"))

        assert (tmp_path / "public" / "keep.txt").read_text() == "keep"
        assert (tmp_path / "public" / "bundled").is_dir()

    def test_root_itself(self, tmp_path: Path):
        make_dir(str(tmp_path), str(tmp_path))
        assert tmp_path.is_dir()

    def test_tolerates_concurrent_creation(self, tmp_path: Path):
        fs = Mock()
        fs.exists.return_value = False
        fs.mkdir.side_effect = FileExistsError

        make_dir(str(tmp_path), str(tmp_path / "a" / "b"), fs=fs)

        assert fs.mkdir.call_count == 2

    def test_other_errors_propagate(self, tmp_path: Path):
        fs = Mock()
        fs.exists.return_value = False
        fs.mkdir.side_effect = PermissionError("denied")

        with pytest.raises(PermissionError):
            make_dir(str(tmp_path), str(tmp_path / "a"), fs=fs)

    def test_outside_root(self, tmp_path: Path):
        with pytest.raises(ValueError, match="not under root"):
            make_dir(str(tmp_path / "root"), str(tmp_path / "elsewhere"))


class TestGetAllFilePathsUnder:
    """Test cases for get_all_file_paths_under."""

    def test_recursion_with_filtering(self, tmp_path: Path):
        root = tmp_path / "styles"
        for relative in ["a.less", "b.css", "nested/c.less", "nested/deeper/d.less", "nested/e.txt"]:
            _write_test_file(root / relative)

        result = get_all_file_paths_under(str(root), recurse_subdirectories=True, keep_extensions="less")

        assert result == sorted(
            [str(root / "a.less"), str(root / "nested" / "c.less"), str(root / "nested" / "deeper" / "d.less")]
        )

    def test_no_recursion(self, tmp_path: Path):
        _write_test_file(tmp_path / "a.less")
        _write_test_file(tmp_path / "sub" / "b.less")

        assert get_all_file_paths_under(str(tmp_path), keep_extensions=[".less"]) == [str(tmp_path / "a.less")]

    def test_glob_pattern(self, tmp_path: Path):
        _write_test_file(tmp_path / "styles" / "a.less")
        _write_test_file(tmp_path / "styles" / "b.css")
        _write_test_file(tmp_path / "styles" / "sub" / "c.less")

        result = get_all_file_paths_under(str(tmp_path / "styles" / "*.less"))

        assert result == [str(tmp_path / "styles" / "a.less")]

    def test_missing_path(self, tmp_path: Path):
        assert get_all_file_paths_under(str(tmp_path / "missing" / "**" / "*"), keep_extensions="less") == []


class TestReadWrite:
    """Test cases for the text helpers."""

    def test_round_trip(self, tmp_path: Path):
        path = str(tmp_path / "out.css")
        write_text(path, "a{color:red}")
        assert read_text(path) == "a{color:red}"

    @pytest.mark.asyncio
    async def test_async_round_trip(self, tmp_path: Path):
        path = str(tmp_path / "out.js")
        await write_text_async(path, "var ü = 1;")
        assert await read_text_async(path) == "var ü = 1;"

    def test_gzip_is_deterministic(self):
        first = gzip_text("a{color:red}")
        assert first == gzip_text("a{color:red}")
        assert gzip.decompress(first) == b"a{color:red}"
