from cryptography.hazmat.primitives import serialization
from pyasn1.codec.der.encoder import encode
from pyasn1.type import univ
from pyasn1_modules import rfc5280, rfc5958

import algorithm_identifier
import crypto_engine
import errors
from pem_envelope import Pem

PUBLIC_KEY_PEM_LABEL = 'PUBLIC KEY'
PRIVATE_KEY_PEM_LABEL = 'PRIVATE KEY'

# PrivateKeyInfo version v1
_SUPPORTED_PRIVATE_KEY_VERSION = 0


def _verify_pem_label(pem: Pem, label: str):
    if pem.label != label:
        raise errors.MalformedStructure(f'Expected "{label}" PEM block, got "{pem.label}"')


class PublicKeyInfo:
    def __init__(self, algorithm: algorithm_identifier.AlgorithmIdentifier, public_key_data: bytes):
        self._algorithm = algorithm
        self._public_key_data = public_key_data

    @property
    def algorithm(self) -> algorithm_identifier.AlgorithmIdentifier:
        return self._algorithm

    @property
    def public_key_data(self) -> bytes:
        return self._public_key_data

    @classmethod
    def from_asn1(cls, spki: rfc5280.SubjectPublicKeyInfo) -> 'PublicKeyInfo':
        if not spki['subjectPublicKey'].isValue:
            raise errors.MalformedStructure('SubjectPublicKeyInfo has no subjectPublicKey')

        return cls(algorithm_identifier.decode_algorithm_identifier(spki['algorithm']),
                   spki['subjectPublicKey'].asOctets())

    @classmethod
    def from_der(cls, octets: bytes) -> 'PublicKeyInfo':
        return cls.from_asn1(algorithm_identifier.decode_der(octets, rfc5280.SubjectPublicKeyInfo()))

    @classmethod
    def from_pem(cls, pem: Pem) -> 'PublicKeyInfo':
        _verify_pem_label(pem, PUBLIC_KEY_PEM_LABEL)

        return cls.from_der(pem.data)

    def encode(self) -> rfc5280.SubjectPublicKeyInfo:
        spki = rfc5280.SubjectPublicKeyInfo()
        spki['algorithm'] = self._algorithm.encode()
        spki['subjectPublicKey'] = univ.BitString.fromOctetString(self._public_key_data)

        return spki

    def to_der(self) -> bytes:
        return encode(self.encode())

    def to_pem(self) -> Pem:
        return Pem(PUBLIC_KEY_PEM_LABEL, self.to_der())

    def __eq__(self, other):
        if not isinstance(other, PublicKeyInfo):
            return NotImplemented

        return self.to_der() == other.to_der()

    def __hash__(self):
        return hash(self.to_der())

    def __repr__(self):
        return f'PublicKeyInfo({self._algorithm!r})'


class PrivateKeyInfo:
    """PKCS #8 PrivateKeyInfo.

    Only version v1 is accepted. Attributes present in a decoded structure are
    not retained and are therefore absent when the value is re-encoded.
    """
    def __init__(self, algorithm: algorithm_identifier.AlgorithmIdentifier, private_key_data: bytes):
        self._algorithm = algorithm
        self._private_key_data = private_key_data

    @property
    def version(self) -> int:
        return _SUPPORTED_PRIVATE_KEY_VERSION

    @property
    def algorithm(self) -> algorithm_identifier.AlgorithmIdentifier:
        return self._algorithm

    @property
    def private_key_data(self) -> bytes:
        return self._private_key_data

    @classmethod
    def from_asn1(cls, pki: rfc5958.PrivateKeyInfo) -> 'PrivateKeyInfo':
        if not pki['version'].isValue or not pki['privateKey'].isValue:
            raise errors.MalformedStructure('PrivateKeyInfo is incomplete')

        version = int(pki['version'])

        if version != _SUPPORTED_PRIVATE_KEY_VERSION:
            raise errors.UnsupportedVersion(f'PrivateKeyInfo version {version} not supported')

        return cls(algorithm_identifier.decode_algorithm_identifier(pki['privateKeyAlgorithm']),
                   pki['privateKey'].asOctets())

    @classmethod
    def from_der(cls, octets: bytes) -> 'PrivateKeyInfo':
        return cls.from_asn1(algorithm_identifier.decode_der(octets, rfc5958.PrivateKeyInfo()))

    @classmethod
    def from_pem(cls, pem: Pem) -> 'PrivateKeyInfo':
        _verify_pem_label(pem, PRIVATE_KEY_PEM_LABEL)

        return cls.from_der(pem.data)

    def encode(self) -> rfc5958.PrivateKeyInfo:
        pki = rfc5958.PrivateKeyInfo()
        pki['version'] = _SUPPORTED_PRIVATE_KEY_VERSION
        pki['privateKeyAlgorithm'] = self._algorithm.encode()
        pki['privateKey'] = self._private_key_data

        return pki

    def to_der(self) -> bytes:
        return encode(self.encode())

    def to_pem(self) -> Pem:
        return Pem(PRIVATE_KEY_PEM_LABEL, self.to_der())

    def public_key_info(self) -> PublicKeyInfo:
        private_key = crypto_engine.load_private_key(self.to_der())

        spki_der = private_key.public_key().public_bytes(
            serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)

        return PublicKeyInfo.from_der(spki_der)

    def __eq__(self, other):
        if not isinstance(other, PrivateKeyInfo):
            return NotImplemented

        return self.to_der() == other.to_der()

    def __hash__(self):
        return hash(self.to_der())

    def __repr__(self):
        return f'PrivateKeyInfo({self._algorithm!r})'
