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

from loguru import logger

from assets_packager.backends.aio import AsyncioExecutor
from assets_packager.core.constants import LESS_EXTENSION, AssetType
from assets_packager.core.options import PackagerOptions
from assets_packager.expander import AssetsExpander, YamlAssetsExpander
from assets_packager.pipeline import Pipeline
from assets_packager.stages.base import ProcessingStage
from assets_packager.stages.io import BundleWriterStage, GroupReaderStage
from assets_packager.stages.scripts import ScriptOptimizeStage
from assets_packager.stages.stylesheets import LessCompileStage, StylesheetOptimizeStage
from assets_packager.tasks import AssetGroupTask, SourceFileTask, Task
from assets_packager.utils.cache_stamps import CacheStampStore


class AssetsPackager:
    """Bundles the asset groups of a project.

    A run goes through four phases, each finished before the next starts:

    1. compile every Less file under the stylesheet source directory to CSS,
    2. bundle the stylesheet groups,
    3. bundle the script groups,
    4. write the cache stamp table, when cache boosters are on.

    Within a phase at most ``options.concurrent`` files or groups are processed
    at the same time. The first error aborts the run; files written so far are
    left in place.

    Args:
        options: Options of the run.
        expander: Source of groups. Defaults to a :class:`YamlAssetsExpander` over ``options.config``.
        cache_stamps: Stamp table. Defaults to the one stored next to the config file.
    """

    def __init__(
        self,
        options: PackagerOptions,
        expander: AssetsExpander | None = None,
        cache_stamps: CacheStampStore | None = None,
    ):
        self.options = options
        self.expander = expander or YamlAssetsExpander(options.config, options.root)
        self.cache_stamps = CacheStampStore.load(options.cache_file) if cache_stamps is None else cache_stamps
        self.all_types = self.expander.all_types()

    def _executor(self) -> AsyncioExecutor:
        return AsyncioExecutor({"max_concurrency": self.options.concurrent})

    def _optimize_stage(self, asset_type: AssetType) -> ProcessingStage:
        if asset_type is AssetType.STYLESHEETS:
            return StylesheetOptimizeStage(self.options)
        return ScriptOptimizeStage(self.options)

    async def precompile_stylesheets(self) -> list[Task]:
        """Compile all Less sources, whether or not a group uses them."""
        if not self.options.wants_type(AssetType.STYLESHEETS) or AssetType.STYLESHEETS not in self.all_types:
            return []

        files = self.expander.process_list(
            f"{self.options.css.source}/**/*",
            extension=LESS_EXTENSION,
            root=self.options.root,
        )
        logger.info(f"Compiling {len(files)} Less file(s) to CSS...")
        if not files:
            return []

        tasks = [SourceFileTask(task_id=path, data=path) for path in files]
        pipeline = Pipeline(name="precompile_stylesheets", stages=[LessCompileStage()])
        return await pipeline.run(self._executor(), initial_tasks=tasks)

    async def process_assets(self, asset_type: AssetType) -> list[Task]:
        """Bundle every selected group of ``asset_type``."""
        if not self.options.wants_type(asset_type) or asset_type not in self.all_types:
            return []

        logger.info(f"Processing type '{asset_type}'...")
        groups = [
            group for group in self.expander.groups_for(asset_type) if self.options.wants_group(asset_type, group)
        ]
        if not groups:
            return []

        pipeline = Pipeline(
            name=f"process_{asset_type}",
            description=f"Bundle {len(groups)} {asset_type} group(s)",
            stages=[
                GroupReaderStage(self.expander, self.options),
                self._optimize_stage(asset_type),
                BundleWriterStage(self.options, self.cache_stamps),
            ],
        )
        tasks = [AssetGroupTask.for_group(asset_type, group) for group in groups]
        return await pipeline.run(self._executor(), initial_tasks=tasks)

    def generate_cache_boosters(self) -> None:
        if not self.options.cache_boosters:
            return

        logger.info("Writing cache boosters config file.")
        self.cache_stamps.save()

    async def run(self) -> list[Task]:
        """Run all phases in order and return the processed group tasks."""
        await self.precompile_stylesheets()
        processed = await self.process_assets(AssetType.STYLESHEETS)
        processed += await self.process_assets(AssetType.JAVASCRIPTS)
        self.generate_cache_boosters()
        return processed

    def process(self) -> list[Task]:
        """Blocking entry point around :meth:`run`."""
        return asyncio.run(self.run())
