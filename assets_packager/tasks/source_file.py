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

from dataclasses import dataclass

from .tasks import Task


@dataclass
class SourceFileTask(Task[str]):
    """Task representing one source file to preprocess.
    ``data`` holds the source path; ``output_path`` is filled in by the
    stage that writes the transformed file.
    """

    output_path: str | None = None

    @property
    def num_items(self) -> int:
        return 1

    def validate(self) -> bool:
        if not isinstance(self.data, str):
            err = f"Invalid data type in task {self.task_id}, expected a file path"
            raise TypeError(err)
        return True
