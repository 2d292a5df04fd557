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
from typing import TYPE_CHECKING, Any

from assets_packager.tasks import Task

if TYPE_CHECKING:
    from assets_packager.stages.base import ProcessingStage


class BaseExecutor(ABC):
    """Executor for a pipeline."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}

    @abstractmethod
    async def execute(self, stages: list["ProcessingStage"], initial_tasks: list[Task] | None = None) -> list[Task]:
        """Execute the pipeline and return the tasks that left the last stage."""


class BaseStageAdapter:
    """Adapts ProcessingStage to an execution backend, if needed."""

    def __init__(self, stage: "ProcessingStage"):
        self.stage = stage

    async def process(self, task: Task) -> list[Task]:
        """Run the stage on one task.

        Args:
            task (Task): Task to process

        Returns:
            list[Task]: Tasks produced by the stage, empty if it filtered the task out
        """
        if not self.stage.validate_input(task):
            msg = f"Task {task!s} failed validation for stage {self.stage}"
            raise ValueError(msg)

        result = await self.stage.process(task)
        if result is None:
            return []
        if isinstance(result, list):
            return result
        return [result]

    def setup(self) -> None:
        """Setup the stage once per run."""
        self.stage.setup()

    def teardown(self) -> None:
        """Teardown the stage once per run."""
        self.stage.teardown()
