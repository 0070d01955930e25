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
Errors raised while packaging a firmware image.
"""


class PackagingError(Exception):
    """Base class of every error the image pipeline raises."""
    pass


class InvalidEncryptionType(PackagingError):
    pass


class CipherError(PackagingError):
    """The cipher rejected the key, IV or plaintext."""
    pass


class SignatureError(PackagingError):
    """Signing failed, or the signing key could not be constructed."""
    pass


class KeyParseError(PackagingError):
    """Externally supplied key material is malformed or missing."""
    pass


class LayoutError(PackagingError):
    """A field does not fit the fixed-size metadata block."""
    pass
