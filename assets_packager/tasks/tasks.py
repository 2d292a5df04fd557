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
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Task(ABC, Generic[T]):
    """A unit of work handed from stage to stage.

    Each task is scheduled on its own: one Less source to compile, or one
    asset group to bundle. ``task_id`` names it in log lines and errors, and
    ``data`` is whatever the first stage needs to start working on it.
    Subclasses check their own fields in :meth:`validate`, which runs as soon
    as the task is built.
    """

    task_id: str
    data: T

    def __post_init__(self) -> None:
        self.validate()

    @property
    @abstractmethod
    def num_items(self) -> int:
        """Number of source files this task covers."""

    @abstractmethod
    def validate(self) -> bool:
        """Raise if the task cannot be processed, return ``True`` otherwise."""
