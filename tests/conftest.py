import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

import key_info


def _to_private_key_info(private_key):
    der = private_key.private_bytes(
        serialization.Encoding.DER, serialization.PrivateFormat.PKCS8, serialization.NoEncryption())

    return key_info.PrivateKeyInfo.from_der(der)


def _to_public_key_info(private_key):
    der = private_key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)

    return key_info.PublicKeyInfo.from_der(der)


@pytest.fixture(scope='session')
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope='session')
def rsa_private_key_info(rsa_private_key):
    return _to_private_key_info(rsa_private_key)


@pytest.fixture(scope='session')
def rsa_public_key_info(rsa_private_key):
    return _to_public_key_info(rsa_private_key)


@pytest.fixture(scope='session')
def ec_private_key_info(ec_private_key):
    return _to_private_key_info(ec_private_key)


@pytest.fixture(scope='session')
def ec_public_key_info(ec_private_key):
    return _to_public_key_info(ec_private_key)
