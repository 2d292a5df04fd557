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

from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from assets_packager.backends.base import BaseExecutor
    from assets_packager.stages.base import ProcessingStage
    from assets_packager.tasks import Task


class Pipeline:
    """An ordered list of stages that every task passes through."""

    def __init__(self, name: str, description: str | None = None, stages: list[ProcessingStage] | None = None):
        self.name = name
        self.description = description
        self.stages: list[ProcessingStage] = list(stages or [])

    def add_stage(self, stage: ProcessingStage) -> Pipeline:
        self.stages.append(stage)
        return self

    def describe(self) -> str:
        lines = [f"Pipeline: {self.name}"]
        if self.description:
            lines.append(f"Description: {self.description}")
        lines.extend(f"  {i + 1}. {stage.name} {stage.get_config()}" for i, stage in enumerate(self.stages))
        return "\n".join(lines)

    async def run(self, executor: BaseExecutor | None = None, initial_tasks: list[Task] | None = None) -> list[Task]:
        """Run all stages over ``initial_tasks`` and return the tasks that came out.

        Defaults to an :class:`AsyncioExecutor` with its default concurrency.
        """
        if not self.stages:
            msg = f"Pipeline '{self.name}' has no stages"
            raise ValueError(msg)

        if executor is None:
            from assets_packager.backends.aio import AsyncioExecutor

            executor = AsyncioExecutor()

        logger.debug(self.describe())
        return await executor.execute(self.stages, initial_tasks=initial_tasks)
