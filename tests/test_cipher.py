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
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from k230img import cipher
from k230img.errors import CipherError
from tests.unpack import sm4_cbc_decrypt

SM4_KEY = bytes.fromhex("0123456789abcdeffedcba9876543210")
SM4_IV = bytes(range(16))


class TestSM4:

    def test_known_answer(self):
        """First block of CBC with a zero IV is the plain SM4 block"""
        ct = cipher.encrypt_sm4_cbc(SM4_KEY, bytes(16), b"", SM4_KEY)
        assert ct[:16].hex() == "681edf34d206965e86b3e94f536e4246"
        # a full block of padding follows an aligned plaintext
        assert len(ct) == 32

    @pytest.mark.parametrize("size", [0, 1, 15, 16, 17, 100, 4096])
    def test_padded_to_block(self, size):
        data = bytes([0x5a]) * size
        ct = cipher.encrypt_sm4_cbc(SM4_KEY, SM4_IV, b"", data)
        assert len(ct) % 16 == 0
        assert len(ct) > size
        assert sm4_cbc_decrypt(SM4_KEY, SM4_IV, ct) == data

    def test_aad_is_ignored(self):
        data = b"firmware"
        assert cipher.encrypt_sm4_cbc(SM4_KEY, SM4_IV, b"", data) == \
            cipher.encrypt_sm4_cbc(SM4_KEY, SM4_IV, b"header", data)

    @pytest.mark.parametrize("key, iv", [
        (SM4_KEY[:15], SM4_IV),
        (SM4_KEY + b"\x00", SM4_IV),
        (SM4_KEY, SM4_IV[:8]),
        (SM4_KEY, b""),
    ])
    def test_bad_sizes(self, key, iv):
        with pytest.raises(CipherError):
            cipher.encrypt_sm4_cbc(key, iv, b"", b"data")


class TestAESGCM:

    def test_known_answer(self):
        """GCM specification, test case 14"""
        ct, tag = cipher.encrypt_aes_gcm(bytes(32), bytes(12), b"",
                                         bytes(16))
        assert ct.hex() == "cea7403d4d606b6e074ec5d3baf39d18"
        assert tag.hex() == "d0d1c8a799996bf0265b98b5d48ab919"

    def test_detached_tag(self):
        key = bytes(range(32))
        nonce = bytes(range(12))
        data = b"\x11" * 100
        ct, tag = cipher.encrypt_aes_gcm(key, nonce, b"", data)
        assert len(ct) == len(data)
        assert len(tag) == cipher.GCM_TAG_SIZE
        assert AESGCM(key).decrypt(nonce, ct + tag, None) == data

    def test_aad_is_authenticated(self):
        key = bytes(range(32))
        nonce = bytes(range(12))
        ct, tag = cipher.encrypt_aes_gcm(key, nonce, b"k230", b"payload")
        assert AESGCM(key).decrypt(nonce, ct + tag, b"k230") == b"payload"
        with pytest.raises(InvalidTag):
            AESGCM(key).decrypt(nonce, ct + tag, b"k231")

    @pytest.mark.parametrize("key, nonce", [
        (bytes(16), bytes(12)),
        (bytes(24), bytes(12)),
        (bytes(32), bytes(16)),
        (bytes(32), bytes(8)),
    ])
    def test_bad_sizes(self, key, nonce):
        with pytest.raises(CipherError):
            cipher.encrypt_aes_gcm(key, nonce, b"", b"data")
