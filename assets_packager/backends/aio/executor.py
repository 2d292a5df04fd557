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
from typing import TYPE_CHECKING, Any

from loguru import logger

from assets_packager.backends.base import BaseExecutor, BaseStageAdapter
from assets_packager.core.constants import DEFAULT_CONCURRENCY

if TYPE_CHECKING:
    from assets_packager.stages.base import ProcessingStage
    from assets_packager.tasks import Task


class AsyncioExecutor(BaseExecutor):
    """Runs every task through all stages on the current event loop.

    At most ``max_concurrency`` tasks are in flight at once; they start in the
    order they were given, but may finish in any order. The first failure
    cancels the tasks still running and is re-raised once they have stopped.

    Config keys:
        max_concurrency: Upper bound on tasks processed at the same time.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        super().__init__(config)
        self.max_concurrency = int(self.config.get("max_concurrency", DEFAULT_CONCURRENCY))
        if self.max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {self.max_concurrency}"
            raise ValueError(msg)

    async def execute(self, stages: list[ProcessingStage], initial_tasks: list[Task] | None = None) -> list[Task]:
        initial_tasks = initial_tasks or []
        if not initial_tasks:
            logger.debug("No tasks to execute")
            return []

        adapters = [BaseStageAdapter(stage) for stage in stages]
        for adapter in adapters:
            adapter.setup()

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(task: Task) -> list[Task]:
            async with semaphore:
                current = [task]
                for adapter in adapters:
                    produced: list[Task] = []
                    for item in current:
                        produced.extend(await adapter.process(item))
                    current = produced
                return current

        workers = [asyncio.ensure_future(run_one(task)) for task in initial_tasks]
        try:
            results = await asyncio.gather(*workers)
        except BaseException:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise
        finally:
            for adapter in adapters:
                adapter.teardown()

        return [task for produced in results for task in produced]
