import argparse
import csv
import logging
import sys

import algorithm_identifier
import errors
import key_info
import pem_envelope

logger = logging.getLogger(__name__)

FIELD_NAMES = ['path', 'label', 'algorithm_oid', 'algorithm_name', 'parameters_hex']

# decoders tried in order for raw DER input
_DER_DECODERS = (
    (key_info.PUBLIC_KEY_PEM_LABEL, key_info.PublicKeyInfo.from_der),
    (key_info.PRIVATE_KEY_PEM_LABEL, key_info.PrivateKeyInfo.from_der),
    ('ALGORITHM IDENTIFIER', algorithm_identifier.decode_algorithm_identifier_der),
)


def print_to_err(message=''):
    print(message, file=sys.stderr)


def _algorithm_of(decoded) -> algorithm_identifier.AlgorithmIdentifier:
    if isinstance(decoded, algorithm_identifier.AlgorithmIdentifier):
        return decoded

    return decoded.algorithm


def _create_row(path, label, alg=None):
    if alg is None:
        return {'path': path, 'label': label, 'algorithm_oid': '?', 'algorithm_name': '?', 'parameters_hex': '?'}

    parameters = alg.parameters

    return {
        'path': path,
        'label': label,
        'algorithm_oid': alg.oid,
        'algorithm_name': alg.name,
        'parameters_hex': parameters.hex() if parameters is not None else '',
    }


def _decode_pem_block(pem: pem_envelope.Pem):
    if pem.label == key_info.PUBLIC_KEY_PEM_LABEL:
        return key_info.PublicKeyInfo.from_pem(pem)
    elif pem.label == key_info.PRIVATE_KEY_PEM_LABEL:
        return key_info.PrivateKeyInfo.from_pem(pem)
    else:
        return algorithm_identifier.decode_algorithm_identifier_der(pem.data)


def _decode_der(der):
    last_error = None

    for label, decoder in _DER_DECODERS:
        try:
            return label, decoder(der)
        except errors.MalformedStructure as e:
            logger.debug('Input is not a "%s": %s', label, e)

            last_error = e

    raise last_error


def dump_pem_file(path):
    try:
        with open(path, 'r') as f:
            text = f.read()
    except IOError as e:
        print_to_err(f'I/O error reading "{path}": {e}')
        return [_create_row(path, '?')]

    try:
        pems = pem_envelope.read_pem_bundle(text)
    except errors.AlgorithmError as e:
        print_to_err(f'Could not read PEM document "{path}": {e}')
        return [_create_row(path, '?')]

    rows = []

    for pem in pems:
        try:
            rows.append(_create_row(path, pem.label, _algorithm_of(_decode_pem_block(pem))))
        except errors.AlgorithmError as e:
            print_to_err(f'Could not decode "{pem.label}" block in "{path}": {e}')

            rows.append(_create_row(path, pem.label))

    return rows


def dump_der_file(path):
    try:
        with open(path, 'rb') as f:
            der = f.read()
    except IOError as e:
        print_to_err(f'I/O error reading "{path}": {e}')
        return [_create_row(path, '?')]

    try:
        label, decoded = _decode_der(der)
    except errors.AlgorithmError as e:
        print_to_err(f'Could not decode DER document "{path}": {e}')
        return [_create_row(path, '?')]

    return [_create_row(path, label, _algorithm_of(decoded))]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Print the algorithm identifiers of PEM or DER documents as CSV')
    parser.add_argument('paths', nargs='+')
    parser.add_argument('--der', action='store_true', help='read raw DER instead of PEM')
    parser.add_argument('--verbose', action='store_true', help='enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    c = csv.DictWriter(sys.stdout, fieldnames=FIELD_NAMES)
    c.writeheader()

    for path in args.paths:
        rows = dump_der_file(path) if args.der else dump_pem_file(path)

        c.writerows(rows)


if __name__ == '__main__':
    main()
