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
Payload encryption for the SM4 and AES image variants.
"""

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from gmssl.sm4 import CryptSM4, SM4_ENCRYPT

from .errors import CipherError

SM4_KEY_SIZE = 16
SM4_BLOCK_SIZE = 16
AES_KEY_SIZE = 32
GCM_NONCE_SIZE = 12
GCM_TAG_SIZE = 16


def encrypt_sm4_cbc(key, iv, aad, plaintext):
    """Encrypt `plaintext` with SM4 in CBC mode.

    The plaintext is PKCS#7 padded, so the result is always a non-empty
    multiple of the block size.  CBC carries no associated data, `aad` is
    accepted so both ciphers share one calling convention and is otherwise
    unused.
    """
    if len(key) != SM4_KEY_SIZE:
        raise CipherError("SM4 key must be {} bytes, got {}".format(
            SM4_KEY_SIZE, len(key)))
    if len(iv) != SM4_BLOCK_SIZE:
        raise CipherError("SM4 IV must be {} bytes, got {}".format(
            SM4_BLOCK_SIZE, len(iv)))

    sm4 = CryptSM4()
    try:
        sm4.set_key(bytes(key), SM4_ENCRYPT)
        ciphertext = sm4.crypt_cbc(bytes(iv), bytes(plaintext))
    except (ValueError, TypeError, IndexError) as e:
        raise CipherError("SM4-CBC encryption failed: {}".format(e)) from e

    if len(ciphertext) == 0 or len(ciphertext) % SM4_BLOCK_SIZE:
        raise CipherError("SM4-CBC produced a misaligned ciphertext "
                          "({} bytes)".format(len(ciphertext)))
    return ciphertext


def encrypt_aes_gcm(key, nonce, aad, plaintext):
    """Encrypt `plaintext` with AES-256-GCM.

    Returns a ``(ciphertext, tag)`` pair; the 16 byte tag is detached and
    it is up to the caller to append it.
    """
    if len(key) != AES_KEY_SIZE:
        raise CipherError("AES-256 key must be {} bytes, got {}".format(
            AES_KEY_SIZE, len(key)))
    if len(nonce) != GCM_NONCE_SIZE:
        raise CipherError("AES-GCM nonce must be {} bytes, got {}".format(
            GCM_NONCE_SIZE, len(nonce)))

    try:
        encryptor = Cipher(algorithms.AES(bytes(key)),
                           modes.GCM(bytes(nonce)),
                           backend=default_backend()).encryptor()
    except ValueError as e:
        raise CipherError("AES-GCM setup failed: {}".format(e)) from e
    if aad:
        encryptor.authenticate_additional_data(bytes(aad))
    ciphertext = encryptor.update(bytes(plaintext)) + encryptor.finalize()
    return ciphertext, encryptor.tag
