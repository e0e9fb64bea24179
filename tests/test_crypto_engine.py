import os

import pytest

import crypto_engine
import errors
from algorithm_identifier import (
    Aes128Cbc, Aes256Cbc, DesEde3Cbc, EcdsaWithSha256, EcdsaWithSha384, Rc2Cbc, Sha1WithRsaEncryption, Sha256,
    Sha256WithRsaEncryption,
)

DATA = b'The quick brown fox jumps over the lazy dog'


@pytest.mark.parametrize('key_type,signature_algorithm', [
    ('rsa', Sha256WithRsaEncryption()),
    ('rsa', Sha1WithRsaEncryption()),
    ('ec', EcdsaWithSha256()),
    ('ec', EcdsaWithSha384()),
])
def test_sign_and_verify(request, key_type, signature_algorithm):
    private_key_info = request.getfixturevalue(f'{key_type}_private_key_info')
    public_key_info = request.getfixturevalue(f'{key_type}_public_key_info')

    signature = crypto_engine.sign(DATA, private_key_info, signature_algorithm)

    assert crypto_engine.verify(DATA, signature, public_key_info, signature_algorithm)
    assert not crypto_engine.verify(DATA + b'.', signature, public_key_info, signature_algorithm)


def test_verify_garbage_signature(ec_public_key_info):
    assert not crypto_engine.verify(DATA, b'\x00' * 8, ec_public_key_info, EcdsaWithSha256())


def test_sign_key_algorithm_mismatch(ec_private_key_info):
    with pytest.raises(errors.IncompatibleAlgorithm):
        crypto_engine.sign(DATA, ec_private_key_info, Sha256WithRsaEncryption())


def test_verify_key_algorithm_mismatch(rsa_public_key_info):
    with pytest.raises(errors.IncompatibleAlgorithm):
        crypto_engine.verify(DATA, b'', rsa_public_key_info, EcdsaWithSha256())


def test_sign_with_non_signature_algorithm(rsa_private_key_info):
    with pytest.raises(errors.IncompatibleAlgorithm):
        crypto_engine.sign(DATA, rsa_private_key_info, Sha256())


def test_load_invalid_keys():
    with pytest.raises(errors.EngineFailure):
        crypto_engine.load_private_key(b'\x30\x00')

    with pytest.raises(errors.EngineFailure):
        crypto_engine.load_public_key(b'\x30\x00')


@pytest.mark.parametrize('cipher_algorithm', [
    Aes128Cbc(os.urandom(16)),
    Aes256Cbc(os.urandom(16)),
    DesEde3Cbc(os.urandom(8)),
])
def test_encrypt_and_decrypt(cipher_algorithm):
    key = os.urandom(cipher_algorithm.key_size)
    data = bytes(64)

    ciphertext = crypto_engine.encrypt(data, key, cipher_algorithm)

    assert len(ciphertext) == len(data)
    assert ciphertext != data
    assert crypto_engine.decrypt(ciphertext, key, cipher_algorithm) == data


def test_encrypt_requires_iv():
    with pytest.raises(errors.InvalidParameterValue):
        crypto_engine.encrypt(bytes(16), bytes(16), Aes128Cbc())


def test_encrypt_partial_block():
    with pytest.raises(errors.EngineFailure):
        crypto_engine.encrypt(bytes(15), bytes(16), Aes128Cbc(bytes(16)))


def test_encrypt_wrong_key_size():
    with pytest.raises(errors.EngineFailure):
        crypto_engine.encrypt(bytes(16), bytes(7), Aes128Cbc(bytes(16)))


def test_encrypt_with_non_cipher():
    with pytest.raises(errors.IncompatibleAlgorithm):
        crypto_engine.encrypt(bytes(16), bytes(16), Sha256())


def test_rc2_requires_128_effective_key_bits():
    with pytest.raises(errors.UnsupportedFeature):
        crypto_engine.encrypt(bytes(8), bytes(16), Rc2Cbc(bytes(8), 64))
