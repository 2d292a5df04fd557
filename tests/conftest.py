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

"""Shared fixtures for the packager tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from io import StringIO
from typing import TYPE_CHECKING

import pytest
from loguru import logger

if TYPE_CHECKING:
    from pathlib import Path


def _write_files(root: Path, files: dict[str, str | bytes]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


@pytest.fixture
def write_files() -> Callable[[Path, dict[str, str | bytes]], None]:
    """Create files (relative path -> content) under a directory."""
    return _write_files


@pytest.fixture
def log_capture() -> Iterator[StringIO]:
    """Collect loguru output of the test as ``LEVEL | message`` lines."""
    buffer = StringIO()
    handler_id = logger.add(buffer, format="{level} | {message}", level="DEBUG", enqueue=False)
    try:
        yield buffer
    finally:
        logger.remove(handler_id)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with one Less stylesheet group and one script group."""
    _write_files(
        tmp_path,
        {
            "config/assets.yml": (
                "stylesheets:\n"
                "  all:\n"
                "    - one\n"
                "javascripts:\n"
                "  application:\n"
                "    - vendor/*\n"
                "    - app\n"
            ),
            "public/stylesheets/one.less": "a { color: red; }\n",
            "public/javascripts/vendor/lib.js": "var lib = function (value) {\n  return value * 2;\n};\n",
            "public/javascripts/app.js": "var result = lib(21);\n",
        },
    )
    return tmp_path
