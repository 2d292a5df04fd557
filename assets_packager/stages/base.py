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

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from loguru import logger

from assets_packager.tasks import Task

X = TypeVar("X", bound=Task)  # task consumed
Y = TypeVar("Y", bound=Task)  # task produced


class ProcessingStage(ABC, Generic[X, Y]):
    """One step a source file or asset group goes through.

    A stage consumes tasks of type X (a :class:`SourceFileTask` or an
    :class:`AssetGroupTask`) and hands tasks of type Y to the next stage.
    ``process`` is a coroutine; every file read, file write and transform call
    inside it is a point where the executor may switch to another task.

    ``process`` may return the task it was given, several tasks, or ``None``
    to drop the task from the rest of the pipeline.
    """

    _name = "ProcessingStage"

    @property
    def name(self) -> str:
        return self._name

    def validate_input(self, task: Task) -> bool:
        """Check that every attribute named by :meth:`inputs` is set on ``task``."""
        missing = [attr for attr in self.inputs() if getattr(task, attr, None) is None]
        if missing:
            logger.error(f"Task {task.task_id} reached stage {self.name} without {missing}")
        return not missing

    @abstractmethod
    async def process(self, task: X) -> Y | list[Y] | None:
        """Transform ``task``.

        Raising aborts the whole run, so stages do not catch errors they cannot
        attribute to a file or group.
        """

    def setup(self) -> None:
        """Called once before the first task reaches the stage."""

    def teardown(self) -> None:
        """Called once after the last task left the stage, even on failure."""

    def inputs(self) -> list[str]:
        """Task attributes that must be set before this stage runs."""
        return []

    def outputs(self) -> list[str]:
        """Task attributes this stage sets or replaces."""
        return []

    def get_config(self) -> dict[str, Any]:
        """Settings shown when a pipeline describes itself."""
        return {
            "name": self.name,
            "inputs": self.inputs(),
            "outputs": self.outputs(),
        }

    def __repr__(self) -> str:
        return self.__class__.__name__
