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

import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import jsbeautifier
import rjsmin
from loguru import logger

from assets_packager.core.constants import CUFON_SIGNATURE
from assets_packager.core.errors import MinificationError
from assets_packager.core.options import PackagerOptions
from assets_packager.stages.base import ProcessingStage
from assets_packager.tasks import AssetGroupTask, BundlePayload, BundleVariant
from assets_packager.utils.file_utils import gzip_text

LINE_SEPARATOR = "\r\n" if os.name == "nt" else "\n"

# A "/" after one of these starts a regular expression literal, not a division.
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = frozenset(
    "return typeof instanceof in of new delete void throw case do else yield await".split()
)
_TRAILING_WORD_RE = re.compile(r"([A-Za-z_$][\w$]*)\s*$")


def should_skip_minification(source: str) -> bool:
    """Scripts registering Cufon fonts are kept as they are."""
    return CUFON_SIGNATURE in source


def _skip_string(code: str, start: int) -> int:
    quote = code[start]
    i = start + 1
    while i < len(code):
        char = code[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return len(code)


def _skip_regex(code: str, start: int) -> int:
    i = start + 1
    in_class = False
    while i < len(code):
        char = code[i]
        if char == "\\":
            i += 2
            continue
        if char == "\n":
            # not a regular expression after all
            return start + 1
        if in_class:
            in_class = char != "]"
        elif char == "[":
            in_class = True
        elif char == "/":
            i += 1
            while i < len(code) and (code[i].isalnum() or code[i] == "_"):
                i += 1
            return i
        i += 1
    return start + 1


def _starts_regex(code: str, start: int, previous: str) -> bool:
    if previous in "+-":
        # postfix ++ and -- end an operand, so a division follows
        return not code[:start].rstrip().endswith(previous * 2)
    if not previous or previous in _REGEX_PRECEDERS:
        return True
    match = _TRAILING_WORD_RE.search(code, max(0, start - 16), start)
    return match is not None and match.group(1) in _REGEX_KEYWORDS


def _token_end(code: str, start: int, previous: str) -> int:
    char = code[start]
    following = code[start + 1 : start + 2]
    if char in "'\"`":
        return _skip_string(code, start)
    if char == "/" and following == "*":
        end = code.find("*/", start + 2)
        return len(code) if end == -1 else end + 2
    if char == "/" and following == "/":
        end = code.find("\n", start)
        return len(code) if end == -1 else end
    if char == "/" and _starts_regex(code, start, previous):
        return _skip_regex(code, start)
    return start + 1


def wrap_lines(code: str, max_line_len: int) -> str:
    """Break ``code`` into lines of roughly ``max_line_len`` characters.

    A break is only inserted right after a ``;`` or ``}`` that is not part of a
    string, template, comment or regular expression literal, so lines may run
    longer than requested.
    """
    parts: list[str] = []
    line_len = 0
    previous = ""
    i = 0
    while i < len(code):
        end = _token_end(code, i, previous)
        token = code[i:end]
        parts.append(token)

        newline = token.rfind("\n")
        line_len = len(token) - newline - 1 if newline != -1 else line_len + len(token)
        if not token.isspace():
            previous = token[-1]

        if token in (";", "}") and line_len >= max_line_len and end < len(code) and code[end] != "\n":
            parts.append("\n")
            line_len = 0
        i = end
    return "".join(parts)


def beautify(code: str, indent: int) -> str:
    opts = jsbeautifier.default_options()
    opts.indent_size = indent
    return jsbeautifier.beautify(code, opts)


@dataclass
class ScriptOptimizeStage(ProcessingStage[AssetGroupTask, AssetGroupTask]):
    """Concatenates and minifies the scripts of a group.

    Minification is skipped when ``js.minify`` is off or when ``skip_predicate``
    matches the concatenated source. Skipped scripts are written verbatim, or
    pretty-printed when ``js.indent`` is set.

    Args:
        options: Options of the current run.
        minifier: JavaScript minifier. Defaults to rjsmin.
        skip_predicate: Decides whether a source must not be minified.
    """

    options: PackagerOptions
    minifier: Callable[[str], str] = field(default=rjsmin.jsmin)
    skip_predicate: Callable[[str], bool] = field(default=should_skip_minification)
    _name: str = "script_optimize"

    def inputs(self) -> list[str]:
        return ["sources"]

    def outputs(self) -> list[str]:
        return ["payload"]

    async def process(self, task: AssetGroupTask) -> AssetGroupTask:
        source = "".join(task.sources)
        js = self.options.js

        if not js.minify or self.skip_predicate(source):
            logger.debug(f"Not minifying script group '{task.group}'")
            code = source if js.indent is None else beautify(source, js.indent)
        else:
            code = self._minify(task.group, source)

        compressed = gzip_text(code) if self.options.gzip else None
        task.payload = BundlePayload(primary=BundleVariant(plain=code, compressed=compressed))
        return task

    def _minify(self, group: str, source: str) -> str:
        try:
            code = self.minifier(source)
        except Exception as e:
            msg = f"Minifying script group '{group}' failed: {e}"
            raise MinificationError(msg) from e

        if self.options.js.line_break_at is not None:
            code = wrap_lines(code, self.options.js.line_break_at)
        if LINE_SEPARATOR != "\n":
            code = code.replace("\n", LINE_SEPARATOR)
        return code

    def get_config(self) -> dict[str, Any]:
        return {
            **super().get_config(),
            "minify": self.options.js.minify,
            "indent": self.options.js.indent,
            "line_break_at": self.options.js.line_break_at,
        }
