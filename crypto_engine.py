import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit_algorithms
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from pyasn1_modules import rfc3565, rfc5480, rfc8018

import algorithm_identifier
import errors

logger = logging.getLogger(__name__)


_HASH_OID_TO_HASH_CLS = {
    str(rfc5480.id_md5): hashes.MD5,
    str(rfc5480.id_sha1): hashes.SHA1,
    str(rfc5480.id_sha224): hashes.SHA224,
    str(rfc5480.id_sha256): hashes.SHA256,
    str(rfc5480.id_sha384): hashes.SHA384,
    str(rfc5480.id_sha512): hashes.SHA512,
}

_CIPHER_OID_TO_CIPHER_CLS = {
    str(rfc8018.desCBC): decrepit_algorithms.TripleDES,
    str(rfc8018.des_EDE3_CBC): decrepit_algorithms.TripleDES,
    str(rfc8018.rc2CBC): decrepit_algorithms.RC2,
    str(rfc3565.id_aes128_CBC): algorithms.AES,
    str(rfc3565.id_aes192_CBC): algorithms.AES,
    str(rfc3565.id_aes256_CBC): algorithms.AES,
}


def load_private_key(der: bytes):
    try:
        return serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.warning('Private key could not be loaded: %s', e)

        raise errors.EngineFailure(f'Could not load private key: {e}') from e


def load_public_key(der: bytes):
    try:
        return serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as e:
        logger.warning('Public key could not be loaded: %s', e)

        raise errors.EngineFailure(f'Could not load public key: {e}') from e


def _verify_signature_and_key_algorithm(signature_algorithm, key_algorithm):
    if not isinstance(signature_algorithm, algorithm_identifier.SignatureAlgorithm):
        raise errors.IncompatibleAlgorithm(f'"{signature_algorithm.name}" is not a signature algorithm')

    if not signature_algorithm.supports_key_algorithm(key_algorithm):
        raise errors.IncompatibleAlgorithm(
            f'Signature algorithm "{signature_algorithm.name}" does not support key algorithm '
            f'"{key_algorithm.name}"')


def _hash_for_signature(signature_algorithm: algorithm_identifier.SignatureAlgorithm) -> hashes.HashAlgorithm:
    h_cls = _HASH_OID_TO_HASH_CLS.get(signature_algorithm.hash_algorithm.oid)

    if h_cls is None:
        raise errors.UnknownAlgorithm(f'Digest method for "{signature_algorithm.name}" not supported')

    logger.debug('Using digest "%s" for "%s"', h_cls.name, signature_algorithm.name)

    return h_cls()


def sign(data: bytes, private_key_info,
         signature_algorithm: algorithm_identifier.AlgorithmIdentifier) -> bytes:
    _verify_signature_and_key_algorithm(signature_algorithm, private_key_info.algorithm)

    h = _hash_for_signature(signature_algorithm)

    private_key = load_private_key(private_key_info.to_der())

    if not isinstance(private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise errors.IncompatibleAlgorithm(f'Unsupported private key type "{type(private_key).__name__}"')

    try:
        if isinstance(private_key, rsa.RSAPrivateKey):
            return private_key.sign(data, padding.PKCS1v15(), h)
        else:
            return private_key.sign(data, ec.ECDSA(h))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.warning('Signing with "%s" failed: %s', signature_algorithm.name, e)

        raise errors.EngineFailure(f'Signing failed: {e}') from e


def verify(data: bytes, signature: bytes, public_key_info,
           signature_algorithm: algorithm_identifier.AlgorithmIdentifier) -> bool:
    _verify_signature_and_key_algorithm(signature_algorithm, public_key_info.algorithm)

    h = _hash_for_signature(signature_algorithm)

    public_key = load_public_key(public_key_info.to_der())

    if not isinstance(public_key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise errors.IncompatibleAlgorithm(f'Unsupported public key type "{type(public_key).__name__}"')

    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(signature, data, padding.PKCS1v15(), h)
        else:
            public_key.verify(signature, data, ec.ECDSA(h))

        return True
    except InvalidSignature:
        return False
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.warning('Verification with "%s" failed: %s', signature_algorithm.name, e)

        raise errors.EngineFailure(f'Verification failed: {e}') from e


def _create_cipher(key: bytes, cipher_algorithm: algorithm_identifier.AlgorithmIdentifier) -> Cipher:
    if not isinstance(cipher_algorithm, algorithm_identifier.CipherAlgorithm):
        raise errors.IncompatibleAlgorithm(f'"{cipher_algorithm.name}" is not a cipher algorithm')

    c_cls = _CIPHER_OID_TO_CIPHER_CLS.get(cipher_algorithm.oid)

    if c_cls is None:
        raise errors.UnknownAlgorithm(f'Cipher method "{cipher_algorithm.name}" not supported')

    # cryptography implements RC2 with 128 effective key bits only
    if isinstance(cipher_algorithm, algorithm_identifier.Rc2Cbc) and cipher_algorithm.effective_key_bits != 128:
        raise errors.UnsupportedFeature(f'{cipher_algorithm.effective_key_bits} bit RC2 not supported')

    if cipher_algorithm.initialization_vector is None:
        raise errors.InvalidParameterValue(f'"{cipher_algorithm.name}" has no initialization vector')

    if isinstance(cipher_algorithm, algorithm_identifier.DesCbc):
        # single DES as three identical 3DES keys
        key = key * 3

    logger.debug('Using cipher "%s" for "%s"', c_cls.name, cipher_algorithm.name)

    try:
        return Cipher(c_cls(key), modes.CBC(cipher_algorithm.initialization_vector))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.warning('Cipher "%s" could not be initialized: %s', cipher_algorithm.name, e)

        raise errors.EngineFailure(f'Could not initialize cipher: {e}') from e


def _apply(context, data: bytes, operation):
    try:
        return context.update(data) + context.finalize()
    except ValueError as e:
        logger.warning('%s failed: %s', operation, e)

        raise errors.EngineFailure(f'{operation} failed: {e}') from e


def encrypt(data: bytes, key: bytes, cipher_algorithm: algorithm_identifier.AlgorithmIdentifier) -> bytes:
    return _apply(_create_cipher(key, cipher_algorithm).encryptor(), data, 'Encryption')


def decrypt(data: bytes, key: bytes, cipher_algorithm: algorithm_identifier.AlgorithmIdentifier) -> bytes:
    return _apply(_create_cipher(key, cipher_algorithm).decryptor(), data, 'Decryption')
