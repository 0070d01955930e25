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

import pytest
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric import rsa

from k230img import keys
from tests.constants import dev_keys


@pytest.fixture(scope="session")
def key_material():
    return keys.load(str(dev_keys))


@pytest.fixture(scope="session")
def make_rsa_key():
    """Factory for RSA keys of a given size, built from raw components."""
    cache = {}

    def _make(key_size):
        if key_size not in cache:
            pk = rsa.generate_private_key(public_exponent=65537,
                                          key_size=key_size,
                                          backend=default_backend())
            numbers = pk.private_numbers()
            cache[key_size] = keys.RSA(numbers.public_numbers.n,
                                       numbers.public_numbers.e,
                                       numbers.d)
        return cache[key_size]

    return _make
