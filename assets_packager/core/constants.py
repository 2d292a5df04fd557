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

from enum import Enum


class AssetType(str, Enum):
    """Kinds of bundles the packager produces."""

    STYLESHEETS = "stylesheets"
    JAVASCRIPTS = "javascripts"

    @property
    def extension(self) -> str:
        return ASSET_EXTENSIONS[self]

    def __str__(self) -> str:
        return self.value


ASSET_EXTENSIONS = {
    AssetType.STYLESHEETS: "css",
    AssetType.JAVASCRIPTS: "js",
}

LESS_EXTENSION = "less"
GZIP_SUFFIX = ".gz"
NO_EMBED_SUFFIX = "-noembed"

DEFAULT_CONCURRENCY = 4
DEFAULT_CONFIG_PATH = "config/assets.yml"
DEFAULT_CSS_SOURCE = "public/stylesheets"
DEFAULT_CSS_BUNDLE_TO = "public/stylesheets/bundled"
DEFAULT_JS_SOURCE = "public/javascripts"
DEFAULT_JS_BUNDLE_TO = "public/javascripts/bundled"

# Directories created while materializing bundle paths get this mode.
DIRECTORY_MODE = 0o775

# Largest resource inlined as a data URI.
MAX_EMBED_SIZE = 32 * 1024

# Scripts registering Cufon fonts break once their identifiers are renamed.
CUFON_SIGNATURE = "Cufon.registerFont"
