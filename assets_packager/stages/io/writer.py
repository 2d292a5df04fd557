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
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from assets_packager.stages.base import ProcessingStage
from assets_packager.tasks import AssetGroupTask, BundleVariant
from assets_packager.utils.file_utils import write_bytes_async, write_text_async
from assets_packager.utils.hash_utils import calculate_md5_stamp, final_path, gzip_path, no_embed_path

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from assets_packager.core.options import PackagerOptions
    from assets_packager.utils.cache_stamps import CacheStampStore


def _variant_writes(path: str, variant: BundleVariant) -> list[tuple[str, Coroutine]]:
    writes = [(path, write_text_async(path, variant.plain))]
    if variant.compressed is not None:
        writes.append((gzip_path(path), write_bytes_async(gzip_path(path), variant.compressed)))
    return writes


@dataclass
class BundleWriterStage(ProcessingStage[AssetGroupTask, AssetGroupTask]):
    """Writes every variant of a group's bundle.

    With cache boosters on, the primary text is hashed, the stamp is recorded
    in ``cache_stamps`` and becomes part of every filename of the group.

    Args:
        options: Options of the current run.
        cache_stamps: Stamp table shared by all groups of the run.
    """

    options: PackagerOptions
    cache_stamps: CacheStampStore | None = None
    _name: str = "bundle_writer"

    def inputs(self) -> list[str]:
        return ["payload"]

    def outputs(self) -> list[str]:
        return ["written"]

    async def process(self, task: AssetGroupTask) -> AssetGroupTask:
        payload = task.payload

        stamp = None
        if self.options.cache_boosters:
            stamp = calculate_md5_stamp(payload.primary.plain)
            if self.cache_stamps is not None:
                self.cache_stamps.record(task.asset_type, task.group, stamp)

        path = final_path(self.options.bundle_file(task.asset_type, task.group), stamp)
        writes = _variant_writes(path, payload.primary)
        if payload.no_embed is not None:
            writes.extend(_variant_writes(no_embed_path(path), payload.no_embed))

        await asyncio.gather(*(write for _, write in writes))
        task.written = [written_path for written_path, _ in writes]

        logger.info(f"  Processed {task.asset_type} group '{task.group}' - squeezing {task.num_items} file(s)")
        return task

    def get_config(self) -> dict[str, Any]:
        return {**super().get_config(), "cache_boosters": self.options.cache_boosters}
