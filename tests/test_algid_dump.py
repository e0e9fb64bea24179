import csv
import io

import algid_dump
from algorithm_identifier import Aes128Cbc, Sha256
from pem_envelope import Pem


def _run(capsys, *argv):
    algid_dump.main(list(argv))

    out = capsys.readouterr()

    return list(csv.DictReader(io.StringIO(out.out))), out.err


def test_dump_pem_bundle(capsys, tmp_path, rsa_public_key_info, ec_private_key_info):
    path = tmp_path / 'bundle.pem'
    path.write_text('\n'.join((rsa_public_key_info.to_pem().text, ec_private_key_info.to_pem().text,
                               Pem('ALGORITHM IDENTIFIER', Aes128Cbc(bytes(16)).to_der()).text)))

    rows, _ = _run(capsys, str(path))

    assert [r['label'] for r in rows] == ['PUBLIC KEY', 'PRIVATE KEY', 'ALGORITHM IDENTIFIER']
    assert rows[0]['algorithm_name'] == 'rsaEncryption'
    assert rows[0]['parameters_hex'] == '0500'
    assert rows[1]['algorithm_oid'] == '1.2.840.10045.2.1'
    assert rows[2]['algorithm_name'] == 'aes128-CBC'
    assert rows[2]['parameters_hex'] == '0410' + '00' * 16


def test_dump_der(capsys, tmp_path, ec_private_key_info):
    key_path = tmp_path / 'key.der'
    key_path.write_bytes(ec_private_key_info.to_der())
    alg_path = tmp_path / 'alg.der'
    alg_path.write_bytes(Sha256().to_der())

    rows, _ = _run(capsys, '--der', str(key_path), str(alg_path))

    assert rows[0]['label'] == 'PRIVATE KEY'
    assert rows[0]['algorithm_name'] == 'ecPublicKey'
    assert rows[1]['label'] == 'ALGORITHM IDENTIFIER'
    assert rows[1]['algorithm_name'] == 'sha256'
    assert rows[1]['parameters_hex'] == ''


def test_dump_reports_failures(capsys, tmp_path):
    bad_path = tmp_path / 'bad.pem'
    bad_path.write_text('not a pem document')

    rows, err = _run(capsys, str(bad_path), str(tmp_path / 'missing.pem'))

    assert [r['algorithm_oid'] for r in rows] == ['?', '?']
    assert 'Could not read PEM document' in err
    assert 'I/O error' in err
