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
from typing import TYPE_CHECKING, Any

import yaml
from loguru import logger

from assets_packager.core.constants import AssetType
from assets_packager.core.errors import ConfigurationError
from assets_packager.expander.base import AssetsExpander
from assets_packager.utils.file_utils import get_all_file_paths_under, get_fs

if TYPE_CHECKING:
    import fsspec


def _has_magic(entry: str) -> bool:
    return any(char in entry for char in "*?[")


class YamlAssetsExpander(AssetsExpander):
    """Reads groups from a YAML file keyed by asset type, then group name.

    .. code-block:: yaml

        stylesheets:
          all:
            - reset
            - layout/*
        javascripts:
          application:
            - vendor/**/*
            - app

    Entries are relative to the type's source directory and may leave out the
    extension. Glob matches are sorted, and a file already in the group is not
    added a second time.
    """

    def __init__(self, config_path: str, root: str, fs: fsspec.AbstractFileSystem | None = None):
        self.config_path = config_path
        self.root = root
        self.fs = fs or get_fs(root)
        self._groups = self._load()

    def _load(self) -> dict[AssetType, dict[str, list[str]]]:
        if not self.fs.exists(self.config_path):
            msg = f'Config file "{self.config_path}" is missing'
            raise ConfigurationError(msg)

        with self.fs.open(self.config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                msg = f'Config file "{self.config_path}" is not valid YAML: {e}'
                raise ConfigurationError(msg) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            msg = f'Config file "{self.config_path}" must map asset types to groups'
            raise ConfigurationError(msg)

        groups: dict[AssetType, dict[str, list[str]]] = {}
        for type_name, type_groups in data.items():
            try:
                asset_type = AssetType(type_name)
            except ValueError:
                logger.warning(f"Ignoring unknown asset type '{type_name}' in {self.config_path}")
                continue
            groups[asset_type] = self._normalize_groups(asset_type, type_groups or {})
        return groups

    def _normalize_groups(self, asset_type: AssetType, type_groups: Any) -> dict[str, list[str]]:  # noqa: ANN401
        if not isinstance(type_groups, dict):
            msg = f"Groups of type '{asset_type}' in {self.config_path} must be a mapping"
            raise ConfigurationError(msg)

        normalized = {}
        for group, entries in type_groups.items():
            if isinstance(entries, str):
                entries = [entries]  # noqa: PLW2901
            if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
                msg = f"Group '{asset_type}/{group}' in {self.config_path} must be a list of paths"
                raise ConfigurationError(msg)
            normalized[str(group)] = entries
        return normalized

    def all_types(self) -> list[AssetType]:
        return [asset_type for asset_type, groups in self._groups.items() if groups]

    def groups_for(self, asset_type: AssetType) -> list[str]:
        return list(self._groups.get(asset_type, {}))

    def process_group(self, asset_type: AssetType, group: str, *, extension: str, path: str) -> list[str]:
        try:
            entries = self._groups[asset_type][group]
        except KeyError as e:
            msg = f"Unknown group '{asset_type}/{group}'"
            raise ConfigurationError(msg) from e

        base = os.path.join(self.root, path)
        suffix = f".{extension}"
        files: list[str] = []
        seen: set[str] = set()
        for entry in entries:
            pattern = os.path.join(base, entry if entry.endswith(suffix) else entry + suffix)
            if _has_magic(entry):
                matches = sorted(match for match in self.fs.glob(pattern) if self.fs.isfile(match))
            elif self.fs.isfile(pattern):
                matches = [pattern]
            else:
                msg = f"File '{entry}' of group '{asset_type}/{group}' not found at {pattern}"
                raise ConfigurationError(msg)

            for match in matches:
                absolute = os.path.abspath(match)
                if absolute not in seen:
                    seen.add(absolute)
                    files.append(absolute)

        if not files:
            logger.warning(f"Group '{asset_type}/{group}' resolved to no files")
        return files

    def process_list(self, pattern: str, *, extension: str, root: str) -> list[str]:
        path = os.path.join(root, pattern)
        recurse = False
        # directory wildcards are listed directly, everything else is globbed
        for suffix, recursive in (("/**/*", True), ("/**", True), ("/*", False)):
            if path.endswith(suffix):
                path, recurse = path[: -len(suffix)], recursive
                break

        return [
            os.path.abspath(p)
            for p in get_all_file_paths_under(
                path,
                recurse_subdirectories=recurse,
                keep_extensions=extension,
                fs=self.fs,
            )
        ]
