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


class PackagerError(Exception):
    """Base class for errors that abort a packaging run."""


class ConfigurationError(PackagerError):
    """Raised when the root directory, config file or options are unusable.

    These are detected before any processing starts, so nothing has been
    written when one is raised.
    """


class TransformError(PackagerError):
    """Raised when a source-to-source transform fails.

    Transforms have no partial-success semantics, so the whole run stops.
    """


class StylesheetCompileError(TransformError):
    """Raised when a Less source cannot be compiled to CSS."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")


class MinificationError(TransformError):
    """Raised when a minifier fails on a group's concatenated source."""
