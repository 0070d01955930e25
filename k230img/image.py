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
K230 firmware image creation.

Every image starts with the magic, a 4 byte length and a 4 byte encryption
type, followed by variant specific metadata and the (possibly encrypted)
versioned payload.
"""

import os.path
import struct
from enum import Enum

from intelhex import IntelHex

from .cipher import encrypt_aes_gcm, encrypt_sm4_cbc
from .digest import sha256
from .errors import (InvalidEncryptionType, KeyParseError, LayoutError,
                     PackagingError)
from .keys.sm2 import SM2_COORD_SIZE

IMAGE_MAGIC = b'K230'
INTEL_HEX_EXT = "hex"

# Size of the metadata block of the NONE and SM4 variants
METADATA_SIZE = 516
# SM4 block: id_len, then id, padding and four coordinates in 512 bytes
SM2_ID_AREA_SIZE = 512
MAX_SM2_ID_SIZE = SM2_ID_AREA_SIZE - 4 * SM2_COORD_SIZE

STRUCT_ENDIAN_DICT = {
        'little': '<',
        'big':    '>'
}


class EncryptionType(Enum):
    NONE = 'none'
    SM4 = 'sm4'
    AES = 'aes'


# Wire value of the enc_type header field
ENC_TYPE_CODES = {
        EncryptionType.NONE: 0,
        EncryptionType.SM4:  1,
        EncryptionType.AES:  2,
}

ENC_TYPE_NAMES = [t.value for t in EncryptionType]


def parse_encryption(name):
    """Map a case-insensitive name onto an EncryptionType."""
    try:
        return EncryptionType(name.lower())
    except (ValueError, AttributeError):
        raise InvalidEncryptionType(
                "Invalid encryption type {!r}, expected one of: {}".format(
                    name, ', '.join(ENC_TYPE_NAMES))) from None


def signing_key(key_material, encryption):
    """Return the signing key an encryption type needs from key_material."""
    if encryption == EncryptionType.SM4:
        return _require(key_material.sm2, 'sm2')
    if encryption == EncryptionType.AES:
        return _require(key_material.rsa, 'rsa')
    return None


def _require(section, name):
    if section is None:
        raise KeyParseError("Key material has no '{}' section".format(name))
    return section


def _log(msg):
    print(os.path.basename(__file__) + ": " + msg)


class Image:

    def __init__(self, endian="little"):
        if endian not in STRUCT_ENDIAN_DICT:
            raise ValueError("Unsupported endianness: {}".format(endian))
        self.endian = endian
        self.base_addr = None
        self.payload = b''
        self.image = None
        self._builders = {
            EncryptionType.NONE: self._create_plain,
            EncryptionType.SM4:  self._create_sm4,
            EncryptionType.AES:  self._create_aes,
        }

    def __repr__(self):
        return "<Image endian={}, base_addr={}, payloadlen=0x{:x}, " \
               "imagelen={}>".format(
                   self.endian,
                   self.base_addr if self.base_addr is not None else "N/A",
                   len(self.payload),
                   "N/A" if self.image is None else
                   "0x{:x}".format(len(self.image)))

    def load(self, path):
        """Load a payload from a binary or Intel HEX file"""
        ext = os.path.splitext(path)[1][1:].lower()
        if ext == INTEL_HEX_EXT:
            ih = IntelHex(path)
            self.payload = bytes(ih.tobinarray())
            self.base_addr = ih.minaddr()
        else:
            with open(path, 'rb') as f:
                self.payload = f.read()
            self.base_addr = None

    def save(self, path):
        """Write the last created image to a given file"""
        if self.image is None:
            raise PackagingError("No image has been created yet")
        with open(path, 'wb') as f:
            f.write(self.image)

    def get_struct_endian(self):
        return STRUCT_ENDIAN_DICT[self.endian]

    def create(self, payload, encryption, key_material):
        """
        Build an image of `payload` and return it as bytes.

        The version tag from the key material is prepended to the payload
        before it is hashed or encrypted.  Nothing is kept from a failed
        call; a previously created image stays as it was.
        """
        if not isinstance(encryption, EncryptionType):
            encryption = parse_encryption(encryption)

        versioned = bytes(key_material.version) + bytes(payload)
        length, metadata, body = self._builders[encryption](versioned,
                                                            key_material)

        e = self.get_struct_endian()
        image = IMAGE_MAGIC
        image += struct.pack(e + 'I', length)
        image += struct.pack(e + 'I', ENC_TYPE_CODES[encryption])
        image += metadata
        image += body
        self.image = image
        return image

    def _create_plain(self, versioned, key_material):
        _log("no encryption + SHA-256")
        digest = sha256(versioned)
        metadata = digest + bytes(METADATA_SIZE - len(digest))
        return len(versioned), metadata, versioned

    def _create_sm4(self, versioned, key_material):
        _log("SM4-CBC + SM2")
        sm4 = _require(key_material.sm4, 'sm4')
        key = signing_key(key_material, EncryptionType.SM4)

        uid = key.uid
        pad_len = MAX_SM2_ID_SIZE - len(uid)
        if pad_len < 0:
            raise LayoutError(
                    "SM2 identity of {} bytes does not fit the {} byte "
                    "metadata block (max {})".format(
                        len(uid), METADATA_SIZE, MAX_SM2_ID_SIZE))

        ciphertext = encrypt_sm4_cbc(sm4.key, sm4.iv, key_material.aad,
                                     versioned)
        r, s = key.sign(key.digest(ciphertext))

        e = self.get_struct_endian()
        metadata = struct.pack(e + 'I', len(uid))
        metadata += uid
        metadata += bytes(pad_len)
        metadata += key.public_x
        metadata += key.public_y
        metadata += r
        metadata += s
        assert len(metadata) == METADATA_SIZE

        _log("SM2 public key hash: " +
             key.public_hash(self.endian).hex())
        return len(ciphertext), metadata, ciphertext

    def _create_aes(self, versioned, key_material):
        aes = _require(key_material.aes, 'aes')
        key = signing_key(key_material, EncryptionType.AES)
        _log("AES-GCM + RSA-{}".format(key.key_size()))

        ciphertext, tag = encrypt_aes_gcm(aes.key, aes.iv, key_material.aad,
                                          versioned)
        body = ciphertext + tag
        signature = key.sign_digest(sha256(tag))

        # The RSA block has no fixed size, it follows the key size
        metadata = key.get_public_bytes() + signature

        _log("RSA public key hash: " + key.public_hash().hex())
        return len(body), metadata, body
