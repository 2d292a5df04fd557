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

from abc import ABC, abstractmethod

from assets_packager.core.constants import AssetType


class AssetsExpander(ABC):
    """Turns an asset configuration into named, ordered groups of files.

    The packager only relies on this interface; how groups are declared is up
    to the implementation.
    """

    @abstractmethod
    def all_types(self) -> list[AssetType]:
        """Asset types that have at least one group."""

    @abstractmethod
    def groups_for(self, asset_type: AssetType) -> list[str]:
        """Group names of ``asset_type``, in declaration order."""

    @abstractmethod
    def process_group(self, asset_type: AssetType, group: str, *, extension: str, path: str) -> list[str]:
        """Resolve a group to absolute file paths, in bundle order.

        Args:
            asset_type: Type the group belongs to.
            group: Group name.
            extension: Extension of the files to bundle, without the dot.
            path: Source directory of the type, relative to the root.
        """

    @abstractmethod
    def process_list(self, pattern: str, *, extension: str, root: str) -> list[str]:
        """Expand a glob relative to ``root`` to the files with ``extension``."""
