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

import json
from typing import TYPE_CHECKING

from loguru import logger

from assets_packager.core.errors import ConfigurationError
from assets_packager.utils.file_utils import get_fs

if TYPE_CHECKING:
    import fsspec

    from assets_packager.core.constants import AssetType


class CacheStampStore:
    """Maps ``<type>/<group>`` to the content hash used in that group's filenames.

    The table is read once when the store is loaded and written back in full by
    :meth:`save`. Entries that a run does not touch are kept as they were.
    Each group processor only ever records its own key, and the store is only
    accessed from the event loop, so no locking is needed.
    """

    def __init__(self, path: str, stamps: dict[str, str] | None = None, fs: fsspec.AbstractFileSystem | None = None):
        self.path = path
        self.fs = fs or get_fs(path)
        self._stamps: dict[str, str] = dict(stamps or {})

    @classmethod
    def load(cls, path: str, fs: fsspec.AbstractFileSystem | None = None) -> CacheStampStore:
        fs = fs or get_fs(path)
        if not fs.exists(path):
            return cls(path, fs=fs)

        with fs.open(path, "r", encoding="utf-8") as f:
            try:
                stamps = json.load(f)
            except json.JSONDecodeError as e:
                msg = f"Cache stamp file \"{path}\" is not valid JSON: {e}"
                raise ConfigurationError(msg) from e
        if not isinstance(stamps, dict) or not all(isinstance(v, str) for v in stamps.values()):
            msg = f"Cache stamp file \"{path}\" must map group keys to stamps"
            raise ConfigurationError(msg)
        logger.debug(f"Loaded {len(stamps)} cache stamp(s) from {path}")
        return cls(path, stamps, fs=fs)

    @staticmethod
    def key(asset_type: AssetType, group: str) -> str:
        return f"{asset_type}/{group}"

    def record(self, asset_type: AssetType, group: str, stamp: str) -> None:
        self._stamps[self.key(asset_type, group)] = stamp

    def get(self, asset_type: AssetType, group: str) -> str | None:
        return self._stamps.get(self.key(asset_type, group))

    def as_dict(self) -> dict[str, str]:
        return dict(self._stamps)

    def save(self) -> None:
        with self.fs.open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._stamps, f)
        logger.debug(f"Saved {len(self._stamps)} cache stamp(s) to {self.path}")
