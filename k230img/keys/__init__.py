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
Key material for k230img.

Keys are never generated here; they are read once from a YAML description
and passed around as a read-only KeyMaterial bundle.
"""

import re
from collections import namedtuple

import yaml

from ..errors import KeyParseError, SignatureError
from .rsa import RSA
from .sm2 import SM2, DEFAULT_UID

DEFAULT_VERSION = bytes(4)

SymmetricKey = namedtuple('SymmetricKey', ['key', 'iv'])

KeyMaterial = namedtuple('KeyMaterial',
                         ['version', 'aad', 'sm4', 'aes', 'sm2', 'rsa'],
                         defaults=(DEFAULT_VERSION, b'', None, None, None,
                                   None))

SECTION_FIELDS = {
    'sm4': ('key', 'iv'),
    'aes': ('key', 'iv'),
    'sm2': ('private_key', 'public_key_x', 'public_key_y', 'id'),
    'rsa': ('n', 'e', 'd'),
}
TOP_LEVEL = ('version', 'aad') + tuple(SECTION_FIELDS)

_HEX_SEPARATORS = re.compile(r'[\s:_]')


def parse_hex(value, name):
    """Decode a hex string such as '0x01:23 45' into bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise KeyParseError("'{}' must be a quoted hex string, got {!r}"
                            .format(name, value))
    text = _HEX_SEPARATORS.sub('', value)
    if text[:2].lower() == '0x':
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise KeyParseError("'{}' is not a valid hex string".format(name)) \
            from None


def parse_int(value, name):
    """Hex numerals (with or without 0x) or plain YAML integers."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise KeyParseError("'{}' must be a hex numeral, got {!r}"
                            .format(name, value))
    try:
        return int(_HEX_SEPARATORS.sub('', value), 16)
    except ValueError:
        raise KeyParseError("'{}' is not a valid hex numeral".format(name)) \
            from None


def _section(config, name):
    section = config.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise KeyParseError("'{}' must be a mapping".format(name))
    fields = SECTION_FIELDS[name]
    missing = [f for f in fields if f not in section and
               not (name == 'sm2' and f == 'id')]
    if missing:
        raise KeyParseError("'{}' is missing {}".format(
            name, ', '.join(missing)))
    unknown = [f for f in section if f not in fields]
    if unknown:
        raise KeyParseError("'{}' has unknown fields: {}".format(
            name, ', '.join(str(f) for f in unknown)))
    return section


def _symmetric(config, name):
    section = _section(config, name)
    if section is None:
        return None
    return SymmetricKey(parse_hex(section['key'], name + '.key'),
                        parse_hex(section['iv'], name + '.iv'))


def _sm2(config):
    section = _section(config, 'sm2')
    if section is None:
        return None
    uid = section.get('id', DEFAULT_UID)
    if isinstance(uid, str):
        uid = uid.encode('utf-8')
    elif not isinstance(uid, (bytes, bytearray)):
        raise KeyParseError("'sm2.id' must be a string")
    return SM2(parse_hex(section['private_key'], 'sm2.private_key'),
               parse_hex(section['public_key_x'], 'sm2.public_key_x'),
               parse_hex(section['public_key_y'], 'sm2.public_key_y'),
               uid)


def _rsa(config):
    section = _section(config, 'rsa')
    if section is None:
        return None
    return RSA(parse_int(section['n'], 'rsa.n'),
               parse_int(section['e'], 'rsa.e'),
               parse_int(section['d'], 'rsa.d'))


def from_dict(config):
    """Build KeyMaterial from an already parsed configuration mapping."""
    if not isinstance(config, dict):
        raise KeyParseError("Key configuration must be a mapping")
    unknown = [k for k in config if k not in TOP_LEVEL]
    if unknown:
        raise KeyParseError("Unknown key configuration entries: {}".format(
            ', '.join(str(k) for k in unknown)))

    version = config.get('version')
    aad = config.get('aad')
    return KeyMaterial(
            version=(DEFAULT_VERSION if version is None
                     else parse_hex(version, 'version')),
            aad=b'' if aad is None else parse_hex(aad, 'aad'),
            sm4=_symmetric(config, 'sm4'),
            aes=_symmetric(config, 'aes'),
            sm2=_sm2(config),
            rsa=_rsa(config))


def load(path):
    """Load key material from a YAML file."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise KeyParseError("{} is not valid YAML: {}".format(path, e)) \
                from e
    return from_dict({} if config is None else config)


__all__ = ['KeyMaterial', 'SymmetricKey', 'SM2', 'RSA', 'KeyParseError',
           'SignatureError', 'load', 'from_dict', 'parse_hex', 'parse_int']
