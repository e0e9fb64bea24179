import base64
import binascii
import io
import re
from typing import List, NamedTuple

from pyasn1_modules import pem

import errors


_PEM_BLOCK_REGEX = re.compile(
    r'-----BEGIN ([A-Z0-9 ]+)-----\s*(.*?)\s*-----END \1-----', re.DOTALL)


def _convert_to_pem(der, document_type):
    b64 = base64.encodebytes(der).decode().strip()

    return '\n'.join((f'-----BEGIN {document_type}-----', b64, f'-----END {document_type}-----'))


class Pem(NamedTuple):
    label: str
    data: bytes

    @property
    def text(self) -> str:
        return _convert_to_pem(self.data, self.label)

    @classmethod
    def from_text(cls, text: str, label: str) -> 'Pem':
        """Read the first block labelled label from text, skipping any other content.

        Counterpart of the text property for callers that expect a single known document type.
        """
        try:
            idx, der = pem.readPemBlocksFromFile(
                io.StringIO(text), (f'-----BEGIN {label}-----', f'-----END {label}-----'))
        except binascii.Error as e:
            raise errors.MalformedStructure(f'Failed to decode "{label}" PEM data: {e}') from e

        # an unterminated block comes back as an empty str
        if idx == -1 or not der:
            raise errors.MalformedStructure(f'No "{label}" PEM block found')

        return cls(label, der)


def read_pem_bundle(text: str) -> List[Pem]:
    pems = []

    for label, payload in _PEM_BLOCK_REGEX.findall(text):
        try:
            data = base64.b64decode(re.sub(r'\s+', '', payload), validate=True)
        except binascii.Error as e:
            raise errors.MalformedStructure(f'Failed to decode "{label}" PEM data: {e}') from e

        pems.append(Pem(label, data))

    if not pems:
        raise errors.MalformedStructure('No PEM blocks found')

    return pems
