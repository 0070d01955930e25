# SPDX-License-Identifier: Apache-2.0
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

from pathlib import Path

from k230img import image
from k230img import main as k230img_main

ENC_TYPES = [*image.ENC_TYPE_NAMES]
SIGNED_ENC_TYPES = [t for t in ENC_TYPES if t != "none"]
HASH_ENCODINGS = [*k230img_main.valid_hash_encodings]

assets_dir = Path(__file__).parent / "assets"
dev_keys = assets_dir / "k230-dev-keys.yaml"

VERSION_TAG = bytes(4)
HEADER_PREFIX_SIZE = 12  # magic, length, enc_type


def tmp_name(tmp_path, name, suffix=""):
    return tmp_path / (name + suffix)
