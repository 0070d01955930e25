#! /usr/bin/env python3
#
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

import sys

import click
from intelhex import IntelHexError

import k230img.keys as keys
from k230img import image, k230img_version
from k230img.errors import PackagingError

MIN_PYTHON_VERSION = (3, 7)
if sys.version_info < MIN_PYTHON_VERSION:
    sys.exit("Python %s.%s or newer is required by k230img."
             % MIN_PYTHON_VERSION)


valid_hash_encodings = ['lang-c', 'raw']
valid_endians = ['little', 'big']


def load_key_material(config):
    try:
        return keys.load(config)
    except FileNotFoundError:
        raise click.UsageError("Key configuration not found: {}"
                               .format(config))
    except PackagingError as e:
        raise click.UsageError("Invalid key configuration: {}".format(e))


def validate_encryption(ctx, param, value):
    try:
        return image.parse_encryption(value)
    except PackagingError as e:
        raise click.BadParameter("{}".format(e))


@click.option('-e', '--encoding', metavar='encoding',
              type=click.Choice(valid_hash_encodings),
              default=valid_hash_encodings[0],
              help='Valid encodings: {}. '
                   'Default value is {}.'
                   .format(', '.join(valid_hash_encodings),
                           valid_hash_encodings[0]))
@click.option('-E', '--endian', type=click.Choice(valid_endians),
              default='little', help="Byte order of the identity length "
                                     "in the SM2 public key block, as "
                                     "given to sign -e")
@click.option('-t', '--type', 'encryption', metavar='type', required=True,
              callback=validate_encryption,
              help='Image type whose signing key is hashed: sm4 or aes')
@click.option('-c', '--config', metavar='filename', required=True,
              help='YAML file holding the key material')
@click.option('-o', '--output', metavar='output', required=False,
              help='Specify the output file\'s name. \
                    The stdout is used if it is not provided.')
@click.command(help='Dump the public key hash the boot ROM compares '
                    'against OTP (SM3 for SM2 keys, SHA256 for RSA keys)')
def getpubhash(config, encryption, endian, output, encoding):
    if encryption == image.EncryptionType.NONE:
        raise click.UsageError("Images without encryption carry no "
                               "public key")
    key_material = load_key_material(config)
    try:
        key = image.signing_key(key_material, encryption)
    except PackagingError as e:
        raise click.UsageError("{}".format(e))

    if encoding == 'raw':
        with click.open_file(output or '-', 'wb') as f:
            key.emit_raw_public_hash(file=f, endian=endian)
    else:
        with click.open_file(output or '-', 'w') as f:
            key.emit_c_public_hash(file=f, endian=endian)


@click.argument('outfile')
@click.argument('infile')
@click.option('-e', '--endian', type=click.Choice(valid_endians),
              default='little', help="Select little or big endian for the "
                                     "header integer fields")
@click.option('-t', '--type', 'encryption', metavar='type', default='none',
              show_default=True, callback=validate_encryption,
              help='One of: {} (case-insensitive)'.format(
                  ', '.join(image.ENC_TYPE_NAMES)))
@click.option('-c', '--config', metavar='filename', required=True,
              help='YAML file holding the version tag and key material')
@click.command(help='''Create an encrypted and/or signed K230 image\n
               INFILE is parsed as Intel HEX if it has a .hex extension,
               otherwise binary format is used''')
def sign(config, encryption, endian, infile, outfile):
    key_material = load_key_material(config)
    img = image.Image(endian=endian)
    try:
        img.load(infile)
    except FileNotFoundError:
        raise click.UsageError("Input file not found")
    except IntelHexError as e:
        raise click.UsageError("Invalid Intel HEX input: {}".format(e))

    try:
        img.create(img.payload, encryption, key_material)
    except PackagingError as e:
        raise click.UsageError("{}".format(e))

    try:
        img.save(outfile)
    except OSError as e:
        raise click.FileError(outfile, hint=e.strerror)
    print("Image written to {} ({} bytes)".format(outfile, len(img.image)))


class AliasesGroup(click.Group):

    _aliases = {
        "create": "sign",
    }

    def list_commands(self, ctx):
        cmds = [k for k in self.commands]
        aliases = [k for k in self._aliases]
        return sorted(cmds + aliases)

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return click.Group.get_command(self, ctx, self._aliases[cmd_name])
        return None


@click.command(help='Print k230img version information')
def version():
    print(k230img_version)


@click.command(cls=AliasesGroup,
               context_settings=dict(help_option_names=['-h', '--help']))
def k230img():
    pass


k230img.add_command(getpubhash)
k230img.add_command(sign)
k230img.add_command(version)


if __name__ == '__main__':
    k230img()
