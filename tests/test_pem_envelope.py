import pytest

import errors
from pem_envelope import Pem, read_pem_bundle


def test_pem_text():
    pem = Pem('TEST DATA', b'\x00\x01\x02')

    assert pem.text == '-----BEGIN TEST DATA-----\nAAEC\n-----END TEST DATA-----'
    assert Pem.from_text(pem.text, 'TEST DATA') == pem


def test_pem_long_data_is_wrapped():
    pem = Pem('TEST DATA', bytes(range(256)))

    assert max(len(line) for line in pem.text.splitlines()) <= 76
    assert Pem.from_text(pem.text, 'TEST DATA') == pem


def test_pem_from_text_skips_surrounding_text():
    text = 'leading text\n' + Pem('OTHER', b'other').text + '\n' + Pem('TEST DATA', b'data').text + '\n'

    assert Pem.from_text(text, 'TEST DATA').data == b'data'


@pytest.mark.parametrize('text', [
    '',
    '-----BEGIN OTHER-----\nAAEC\n-----END OTHER-----',
    '-----BEGIN TEST DATA-----\nAAEC\n',
])
def test_pem_from_text_missing_block(text):
    with pytest.raises(errors.MalformedStructure):
        Pem.from_text(text, 'TEST DATA')


def test_read_pem_bundle():
    text = '\n'.join((Pem('PUBLIC KEY', b'first').text, 'comment', Pem('PRIVATE KEY', b'second').text))

    assert read_pem_bundle(text) == [Pem('PUBLIC KEY', b'first'), Pem('PRIVATE KEY', b'second')]


@pytest.mark.parametrize('text', [
    'no pem here',
    '-----BEGIN TEST DATA-----\n!!!!\n-----END TEST DATA-----',
    '-----BEGIN TEST DATA-----\nAAE\n-----END TEST DATA-----',
])
def test_read_pem_bundle_invalid(text):
    with pytest.raises(errors.MalformedStructure):
        read_pem_bundle(text)
