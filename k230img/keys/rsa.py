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
RSA signing key built from raw (n, e, d) components.
"""

import rsa
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateNumbers, RSAPublicNumbers, rsa_crt_dmp1, rsa_crt_dmq1,
    rsa_crt_iqmp, rsa_recover_prime_factors)

from .general import KeyClass
from ..digest import sha256
from ..errors import SignatureError

# 0x00 0x01 PS 0x00, with at least 8 bytes of PS
PKCS1_MIN_PAD = 11


def int_to_le_bytes(value):
    """Minimal-length little-endian encoding of a non-negative integer."""
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), 'little')


class RSA(KeyClass):
    """
    Wrapper around an RSA private key whose primes are recovered from the
    modulus and both exponents.
    """
    def __init__(self, n, e, d):
        if n <= 0 or d <= 0 or not 3 <= e < n:
            raise SignatureError("RSA key components are out of range")
        try:
            p, q = rsa_recover_prime_factors(n, e, d)
            numbers = RSAPrivateNumbers(
                    p=p, q=q, d=d,
                    dmp1=rsa_crt_dmp1(d, p),
                    dmq1=rsa_crt_dmq1(d, q),
                    iqmp=rsa_crt_iqmp(p, q),
                    public_numbers=RSAPublicNumbers(e, n))
            self.key = numbers.private_key(default_backend())
        except (ValueError, TypeError) as ex:
            raise SignatureError(
                    "RSA key rejected: {}".format(ex)) from ex
        # Raw private operation for signing without a DigestInfo prefix
        self._signer = rsa.PrivateKey(n, e, d, p, q)

    def shortname(self):
        return "rsa"

    def key_size(self):
        return self.key.key_size

    def sig_len(self):
        return (self.key_size() + 7) // 8

    def public_numbers(self):
        return self.key.public_key().public_numbers()

    def sign_digest(self, digest):
        """
        Sign `digest` with PKCS#1 v1.5 type 1 padding and no DigestInfo
        prefix.  The digest is embedded as-is in the encoded message.
        """
        k = self.sig_len()
        if len(digest) > k - PKCS1_MIN_PAD:
            raise SignatureError("Digest of {} bytes does not fit a {} bit "
                                 "key".format(len(digest), self.key_size()))
        em = b'\x00\x01' + b'\xff' * (k - 3 - len(digest)) + b'\x00' + digest

        # cryptography only signs DigestInfo-prefixed hashes
        m = int.from_bytes(em, 'big')
        sig = self._signer.blinded_encrypt(m).to_bytes(k, 'big')

        try:
            recovered = self.key.public_key().recover_data_from_signature(
                    sig, padding.PKCS1v15(), None)
        except InvalidSignature as ex:
            raise SignatureError("RSA signature self-check failed") from ex
        if recovered != bytes(digest):
            raise SignatureError("RSA signature self-check failed")
        return sig

    def get_public_bytes(self):
        pub = self.public_numbers()
        return int_to_le_bytes(pub.n) + int_to_le_bytes(pub.e)

    def public_hash(self, endian='little'):
        """n and e are always little-endian, `endian` does not apply."""
        return sha256(self.get_public_bytes())
