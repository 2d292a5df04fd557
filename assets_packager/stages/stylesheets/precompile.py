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

import io
import os
from collections.abc import Callable
from dataclasses import dataclass, field

from lesscpy.lessc.formatter import Formatter
from lesscpy.lessc.parser import LessParser
from loguru import logger

from assets_packager.core.constants import ASSET_EXTENSIONS, LESS_EXTENSION, AssetType
from assets_packager.core.errors import StylesheetCompileError
from assets_packager.stages.base import ProcessingStage
from assets_packager.tasks import SourceFileTask
from assets_packager.utils.file_utils import read_text_async, write_text_async

LessCompiler = Callable[[str, str], str]


class StrictLessParser(LessParser):
    """lesscpy parser that also fails on input ending inside an open block."""

    def p_error(self, t):  # noqa: ANN001, ANN201
        if t is None:
            self.register.register(f"E: {self.target}: unexpected end of input")
        return super().p_error(t)


@dataclass
class _FormatOptions:
    minify: bool = False
    xminify: bool = False
    tabs: bool = False
    spaces: bool = True


def compile_less(source: str, filename: str) -> str:
    """Compile Less ``source`` to plain CSS with lesscpy.

    ``@import`` paths resolve against the directory of ``filename``.
    """
    stream = io.StringIO(source)
    stream.name = filename
    parser = StrictLessParser(fail_with_exc=True)
    parser.parse(file=stream)
    return Formatter(_FormatOptions()).format(parser)


def compiled_path(filename: str) -> str:
    """``site/one.less`` compiles to ``site/one.css``."""
    stem, extension = os.path.splitext(filename)
    if extension.lstrip(".") != LESS_EXTENSION:
        msg = f"Expected a .{LESS_EXTENSION} file, got {filename}"
        raise ValueError(msg)
    return f"{stem}.{ASSET_EXTENSIONS[AssetType.STYLESHEETS]}"


@dataclass
class LessCompileStage(ProcessingStage[SourceFileTask, SourceFileTask]):
    """Compiles one Less source and writes the CSS next to it.

    Any compile failure is fatal for the whole run and names the file.

    Args:
        compiler: Function turning Less text into CSS text. Defaults to lesscpy.
    """

    compiler: LessCompiler = field(default=compile_less)
    _name: str = "less_compile"

    def inputs(self) -> list[str]:
        return ["data"]

    def outputs(self) -> list[str]:
        return ["output_path"]

    async def process(self, task: SourceFileTask) -> SourceFileTask:
        filename = task.data
        logger.info(f"  Compiling '{os.path.basename(filename)}'...")

        source = await read_text_async(filename)
        try:
            css = self.compiler(source, filename)
        except StylesheetCompileError:
            raise
        except Exception as e:
            raise StylesheetCompileError(filename, str(e) or e.__class__.__name__) from e

        output_path = compiled_path(filename)
        await write_text_async(output_path, css)
        task.output_path = output_path
        return task
