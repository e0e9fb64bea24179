import pytest
from pyasn1_modules import rfc5480

import errors
from algorithm_identifier import (
    Aes128Cbc, EcdsaWithSha1, EcdsaWithSha384, EcPublicKey, HmacWithSha256, Md5, Md5WithRsaEncryption,
    RsaEncryption, Sha1, Sha256, Sha256WithRsaEncryption, Sha384, Sha512, Sha512WithRsaEncryption,
)
from signature_factory import for_asymmetric_crypto


@pytest.mark.parametrize('crypto_algorithm,hash_algorithm,expected_cls', [
    (RsaEncryption(), Sha256(), Sha256WithRsaEncryption),
    (RsaEncryption(), Sha512(), Sha512WithRsaEncryption),
    (RsaEncryption(), Md5(), Md5WithRsaEncryption),
    (EcPublicKey(), Sha1(), EcdsaWithSha1),
    (EcPublicKey(str(rfc5480.secp384r1)), Sha384(), EcdsaWithSha384),
])
def test_for_asymmetric_crypto(crypto_algorithm, hash_algorithm, expected_cls):
    signature_algorithm = for_asymmetric_crypto(crypto_algorithm, hash_algorithm)

    assert type(signature_algorithm) is expected_cls
    assert signature_algorithm.hash_algorithm == hash_algorithm
    assert signature_algorithm.supports_key_algorithm(crypto_algorithm)


@pytest.mark.parametrize('crypto_algorithm,hash_algorithm', [
    (RsaEncryption(), HmacWithSha256()),
    (EcPublicKey(), Md5()),
    (Aes128Cbc(), Sha256()),
])
def test_unsupported_combination(crypto_algorithm, hash_algorithm):
    with pytest.raises(errors.UnsupportedCombination):
        for_asymmetric_crypto(crypto_algorithm, hash_algorithm)
