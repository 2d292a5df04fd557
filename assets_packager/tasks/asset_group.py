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

from dataclasses import dataclass, field

from assets_packager.core.constants import AssetType

from .tasks import Task


@dataclass
class BundleVariant:
    """One rendition of a bundle: its text and, when gzip is on, the compressed bytes."""

    plain: str
    compressed: bytes | None = None


@dataclass
class BundlePayload:
    """Everything a group's transform produced.

    ``primary`` is the embedded rendition for stylesheets and the only one for
    scripts. ``no_embed`` is only set for stylesheets built with a
    non-embedding variant.
    """

    primary: BundleVariant
    no_embed: BundleVariant | None = None


@dataclass
class AssetGroupTask(Task[list[str]]):
    """Task representing one named group of assets to bundle.
    ``data`` holds the group's resolved file paths in bundle order. The
    reader stage fills ``sources`` with their contents, the optimize stages
    set ``payload``, and the writer records every file it wrote in ``written``.
    """

    asset_type: AssetType = AssetType.STYLESHEETS
    group: str = ""
    data: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    payload: BundlePayload | None = None
    written: list[str] = field(default_factory=list)

    @property
    def num_items(self) -> int:
        """Number of files in this group."""
        return len(self.data)

    @property
    def key(self) -> str:
        return f"{self.asset_type}/{self.group}"

    def validate(self) -> bool:
        if not isinstance(self.asset_type, AssetType):
            err = f"Invalid asset type {self.asset_type!r} in task {self.task_id}"
            raise TypeError(err)
        if not self.group:
            err = f"Missing group name in task {self.task_id}"
            raise ValueError(err)
        if not isinstance(self.data, list):
            err = f"Invalid data type in task {self.task_id}"
            raise TypeError(err)
        return True

    @classmethod
    def for_group(cls, asset_type: AssetType, group: str) -> "AssetGroupTask":
        return cls(task_id=f"{asset_type}/{group}", asset_type=asset_type, group=group)
