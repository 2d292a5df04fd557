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
from dataclasses import dataclass, field

from assets_packager.core.constants import (
    ASSET_EXTENSIONS,
    DEFAULT_CONCURRENCY,
    DEFAULT_CSS_BUNDLE_TO,
    DEFAULT_CSS_SOURCE,
    DEFAULT_JS_BUNDLE_TO,
    DEFAULT_JS_SOURCE,
    AssetType,
)

_HOST_RANGE_RE = re.compile(r"\[(\d+)-(\d+)\]")


def expand_asset_hosts(pattern: str | None) -> list[str]:
    """Expand an asset host pattern into the list of host names.

    ``assets[0-3].example.com`` expands to ``assets0.example.com`` through
    ``assets3.example.com``. Comma-separated patterns are expanded one by one.
    """
    if not pattern:
        return []

    hosts = []
    for part in pattern.split(","):
        part = part.strip()  # noqa: PLW2901
        if not part:
            continue
        match = _HOST_RANGE_RE.search(part)
        if match is None:
            hosts.append(part)
            continue
        start, end = int(match.group(1)), int(match.group(2))
        if start > end:
            msg = f"Invalid asset host range in {part!r}"
            raise ValueError(msg)
        hosts.extend(part[: match.start()] + str(i) + part[match.end() :] for i in range(start, end + 1))
    return hosts


@dataclass(frozen=True)
class OnlyFilter:
    """Restricts a run to the named output files.

    ``*.css`` and ``*.js`` stand for every group of the matching type.
    """

    names: frozenset[str]

    @classmethod
    def parse(cls, value: str | None) -> OnlyFilter | None:
        if value is None:
            return None
        names = frozenset(name.strip() for name in value.split(",") if name.strip())
        if not names:
            return None
        return cls(names)

    def has(self, filename: str) -> bool:
        if filename in self.names:
            return True
        extension = filename.rsplit(".", 1)[-1]
        return f"*.{extension}" in self.names

    def has_type(self, asset_type: AssetType) -> bool:
        suffix = "." + ASSET_EXTENSIONS[asset_type]
        return any(name.endswith(suffix) for name in self.names)


@dataclass
class StylesheetOptions:
    """Stylesheet specific options.

    Attributes:
        source: Source directory, relative to the root.
        bundle_to: Output directory, relative to the root.
        embed_all: Embed every eligible referenced resource, not only ``?embed`` ones.
        safe_embed: Also emit a ``-noembed`` variant without data URIs.
        asset_hosts: Host names rewritten URLs are distributed over.
    """

    source: str = DEFAULT_CSS_SOURCE
    bundle_to: str = DEFAULT_CSS_BUNDLE_TO
    embed_all: bool = False
    safe_embed: bool = False
    asset_hosts: list[str] = field(default_factory=list)


@dataclass
class ScriptOptions:
    """Script specific options.

    Attributes:
        source: Source directory, relative to the root.
        bundle_to: Output directory, relative to the root.
        minify: Whether to minify at all.
        indent: Indent width used to pretty-print scripts that are not minified.
            ``None`` re-emits them verbatim.
        line_break_at: Wrap minified output at roughly this many characters.
    """

    source: str = DEFAULT_JS_SOURCE
    bundle_to: str = DEFAULT_JS_BUNDLE_TO
    minify: bool = True
    indent: int | None = None
    line_break_at: int | None = None

    def __post_init__(self):
        if self.indent is not None and self.indent < 0:
            msg = f"Indent must be a non-negative integer, got {self.indent}"
            raise ValueError(msg)
        if self.line_break_at is not None and self.line_break_at <= 0:
            msg = f"Line break width must be a positive integer, got {self.line_break_at}"
            raise ValueError(msg)


@dataclass
class PackagerOptions:
    """Process-wide options, resolved once before a run starts."""

    root: str
    config: str
    concurrent: int = DEFAULT_CONCURRENCY
    gzip: bool = False
    cache_boosters: bool = False
    only: OnlyFilter | None = None
    css: StylesheetOptions = field(default_factory=StylesheetOptions)
    js: ScriptOptions = field(default_factory=ScriptOptions)

    def __post_init__(self):
        if self.concurrent < 1:
            msg = f"Concurrency limit must be at least 1, got {self.concurrent}"
            raise ValueError(msg)
        self.root = os.path.abspath(self.root)
        if not os.path.isabs(self.config):
            self.config = os.path.join(self.root, self.config)

    @property
    def cache_file(self) -> str:
        return cache_file_for(self.config)

    def source_path(self, asset_type: AssetType) -> str:
        return self.css.source if asset_type is AssetType.STYLESHEETS else self.js.source

    def bundle_path(self, asset_type: AssetType) -> str:
        return self.css.bundle_to if asset_type is AssetType.STYLESHEETS else self.js.bundle_to

    def bundle_file(self, asset_type: AssetType, group: str) -> str:
        """Absolute path of a group's bundle, before any stamp or variant suffix."""
        return os.path.join(self.root, self.bundle_path(asset_type), f"{group}.{asset_type.extension}")

    def wants_type(self, asset_type: AssetType) -> bool:
        """Whether the ``only`` filter leaves any output of this type."""
        return self.only is None or self.only.has_type(asset_type)

    def wants_group(self, asset_type: AssetType, group: str) -> bool:
        return self.only is None or self.only.has(f"{group}.{asset_type.extension}")


def cache_file_for(config_path: str) -> str:
    """Return the cache stamp sidecar that sits next to ``config_path``."""
    return os.path.join(os.path.dirname(config_path), f".{os.path.basename(config_path)}.json")
