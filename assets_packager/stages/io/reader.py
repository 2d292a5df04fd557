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

import asyncio
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from assets_packager.stages.base import ProcessingStage
from assets_packager.tasks import AssetGroupTask
from assets_packager.utils.file_utils import make_dir, read_text_async

if TYPE_CHECKING:
    from assets_packager.core.options import PackagerOptions
    from assets_packager.expander import AssetsExpander


@dataclass
class GroupReaderStage(ProcessingStage[AssetGroupTask, AssetGroupTask]):
    """Resolves a group to its files and reads them.

    The files are read concurrently, but ``sources`` keeps the order the
    expander returned them in. The group's output directory is created here,
    before any transform runs.

    Args:
        expander: Resolves group names to files.
        options: Options of the current run.
    """

    expander: AssetsExpander
    options: PackagerOptions
    _name: str = "group_reader"

    def inputs(self) -> list[str]:
        return ["group"]

    def outputs(self) -> list[str]:
        return ["data", "sources"]

    async def process(self, task: AssetGroupTask) -> AssetGroupTask:
        asset_type = task.asset_type
        task.data = self.expander.process_group(
            asset_type,
            task.group,
            extension=asset_type.extension,
            path=self.options.source_path(asset_type),
        )

        output_dir = os.path.dirname(self.options.bundle_file(asset_type, task.group))
        await asyncio.to_thread(make_dir, self.options.root, output_dir)

        task.sources = list(await asyncio.gather(*(read_text_async(path) for path in task.data)))
        logger.debug(f"Read {len(task.sources)} file(s) of {task.key}")
        return task
