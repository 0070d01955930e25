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

"""
Digest helpers shared by every image variant.
"""

import hashlib

from gmssl import func, sm3 as gm_sm3

DIGEST_SIZE = 32


def sha256(data):
    return hashlib.sha256(data).digest()


def sm3(data):
    # gmssl works on lists of ints and returns a hex string
    return bytes.fromhex(gm_sm3.sm3_hash(func.bytes_to_list(data)))
