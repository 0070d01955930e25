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
SM2 signing key, as used by the SM4-CBC image variant.
"""

import os
import struct

from gmssl import sm2

from .general import KeyClass
from ..digest import sm3
from ..errors import SignatureError

SM2_COORD_SIZE = 32
DEFAULT_UID = b'1234567812345678'
# ENTL is a 16 bit count of identity bits
MAX_UID_SIZE = 0xffff // 8


class SM2(KeyClass):
    """
    SM2 key pair with the signer identity bound into every signature.

    The public coordinates are big-endian, as they appear in the identity
    digest and in the image header.
    """
    def __init__(self, private_key, public_x, public_y, uid=DEFAULT_UID):
        for name, value in (('private key', private_key),
                            ('public key X', public_x),
                            ('public key Y', public_y)):
            if len(value) != SM2_COORD_SIZE:
                raise SignatureError(
                    "SM2 {} must be {} bytes, got {}".format(
                        name, SM2_COORD_SIZE, len(value)))
        if len(uid) > MAX_UID_SIZE:
            raise SignatureError("SM2 identity is too long ({} bytes)"
                                 .format(len(uid)))

        self.public_x = bytes(public_x)
        self.public_y = bytes(public_y)
        self.uid = bytes(uid)
        self._crypt = sm2.CryptSM2(
                private_key=bytes(private_key).hex(),
                public_key=(self.public_x + self.public_y).hex())

        d = int.from_bytes(private_key, 'big')
        if not 0 < d < self._order() - 1:
            raise SignatureError("SM2 private key is out of range")
        self._za = self._z_value()

    def shortname(self):
        return "sm2"

    def _table(self, name):
        try:
            return bytes.fromhex(self._crypt.ecc_table[name])
        except (KeyError, ValueError) as e:
            raise SignatureError(
                    "Unable to read SM2 curve parameter '{}'".format(name)) from e

    def _order(self):
        return int.from_bytes(self._table('n'), 'big')

    def _z_value(self):
        g = self._table('g')
        z = struct.pack('>H', len(self.uid) * 8)
        z += self.uid
        z += self._table('a')
        z += self._table('b')
        z += g[:SM2_COORD_SIZE]
        z += g[SM2_COORD_SIZE:]
        z += self.public_x
        z += self.public_y
        return sm3(z)

    def z_value(self):
        """The identity digest Za."""
        return self._za

    def digest(self, message):
        """SM3(Za || message)"""
        return sm3(self._za + message)

    def sign(self, message):
        """
        Sign `message` and return ``(r, s)``, each as 32 little-endian bytes.

        A fresh nonce is drawn for every call, so signatures over the same
        message differ between runs.
        """
        order = self._order()
        k = int.from_bytes(os.urandom(SM2_COORD_SIZE), 'big') % (order - 1) + 1
        try:
            sig = self._crypt.sign(self.digest(message), '%064x' % k)
        except (ValueError, TypeError) as e:
            raise SignatureError("SM2 signing failed: {}".format(e)) from e
        if sig is None:
            raise SignatureError("SM2 signing failed, degenerate nonce")

        r = int(sig[:2 * SM2_COORD_SIZE], 16)
        s = int(sig[2 * SM2_COORD_SIZE:4 * SM2_COORD_SIZE], 16)
        return (r.to_bytes(SM2_COORD_SIZE, 'little'),
                s.to_bytes(SM2_COORD_SIZE, 'little'))

    def get_public_bytes(self, endian='little'):
        return (len(self.uid).to_bytes(4, endian) + self.uid +
                self.public_x + self.public_y)

    def public_hash(self, endian='little'):
        return sm3(self.get_public_bytes(endian))
