import copy
import logging
from abc import ABC
from typing import Optional

from pyasn1.codec.der.decoder import decode
from pyasn1.codec.der.encoder import encode
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ
from pyasn1_modules import rfc3565, rfc4055, rfc5280, rfc5480, rfc8018

import algorithm_asn1
import errors
import mappings

logger = logging.getLogger(__name__)


_ALG_OID_TO_CLS = {}

_NULL_DER = encode(univ.Null(''))


def decode_der(octets: bytes, asn1_spec):
    try:
        decoded, rest = decode(octets, asn1Spec=asn1_spec)
    except PyAsn1Error as e:
        raise errors.MalformedStructure(f'Could not decode {type(asn1_spec).__name__}: {e}') from e

    if rest:
        raise errors.MalformedStructure(f'{len(rest)} trailing octet(s) after {type(asn1_spec).__name__}')

    return decoded


def _create_algorithm_identifier(alg_oid, parameters: Optional[bytes] = None) -> rfc5280.AlgorithmIdentifier:
    alg_id = rfc5280.AlgorithmIdentifier()
    alg_id['algorithm'] = alg_oid
    if parameters is not None:
        alg_id['parameters'] = parameters

    return alg_id


def _verify_absent_or_null_parameters(alg_name, parameters: Optional[bytes]):
    if parameters is not None and parameters != _NULL_DER:
        raise errors.MalformedStructure(f'Parameters of "{alg_name}" must be absent or NULL')


def _verify_iv_size(alg_name, iv_size, iv: Optional[bytes]):
    if iv is not None and len(iv) != iv_size:
        raise errors.InvalidIVSize(f'Invalid IV size for "{alg_name}": expected {iv_size} octets, got {len(iv)}')


class AlgorithmIdentifier(ABC):
    algorithm_oid: univ.ObjectIdentifier = None
    name: str = None

    @property
    def oid(self) -> str:
        return str(self.algorithm_oid)

    @property
    def parameters(self) -> Optional[bytes]:
        """DER encoding of the parameters field, or None when the field is omitted."""
        return None

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'AlgorithmIdentifier':
        raise NotImplementedError()

    def encode(self) -> rfc5280.AlgorithmIdentifier:
        return _create_algorithm_identifier(self.algorithm_oid, self.parameters)

    def to_der(self) -> bytes:
        return encode(self.encode())

    def __eq__(self, other):
        if not isinstance(other, AlgorithmIdentifier):
            return NotImplemented

        return self.to_der() == other.to_der()

    def __hash__(self):
        return hash(self.to_der())

    def __repr__(self):
        return f'{type(self).__name__}({self.oid})'


class GenericAlgorithmIdentifier(AlgorithmIdentifier):
    def __init__(self, oid, parameters: Optional[bytes] = None):
        try:
            self.algorithm_oid = univ.ObjectIdentifier(oid)
        except PyAsn1Error as e:
            raise errors.MalformedStructure(f'Invalid object identifier "{oid}"') from e

        self._parameters = parameters

    @property
    def name(self) -> str:
        return self.oid

    @property
    def parameters(self) -> Optional[bytes]:
        return self._parameters


def _register(*classes):
    for cls in classes:
        _ALG_OID_TO_CLS[str(cls.algorithm_oid)] = cls


def get_algorithm_class(oid):
    return _ALG_OID_TO_CLS.get(str(oid))


def decode_algorithm_identifier(alg_id: rfc5280.AlgorithmIdentifier) -> AlgorithmIdentifier:
    """Build the specific identifier for the OID in alg_id.

    OIDs without a specific implementation yield a GenericAlgorithmIdentifier
    that carries the parameters field verbatim.
    """
    alg_oid = alg_id['algorithm']

    if not alg_oid.isValue:
        raise errors.MalformedStructure('Algorithm identifier has no algorithm OID')

    parameters = alg_id['parameters'].asOctets() if alg_id['parameters'].isValue else None

    alg_cls = get_algorithm_class(alg_oid)

    if alg_cls is None:
        logger.debug('No specific algorithm identifier for "%s", using generic', alg_oid)

        return GenericAlgorithmIdentifier(alg_oid, parameters)

    return alg_cls.from_parameters(parameters)


def decode_algorithm_identifier_der(octets: bytes) -> AlgorithmIdentifier:
    return decode_algorithm_identifier(decode_der(octets, rfc5280.AlgorithmIdentifier()))


class HashAlgorithm(AlgorithmIdentifier):
    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'HashAlgorithm':
        _verify_absent_or_null_parameters(cls.name, parameters)

        return cls()


class Md5(HashAlgorithm):
    algorithm_oid = rfc5480.id_md5
    name = 'md5'


class Sha1(HashAlgorithm):
    algorithm_oid = rfc5480.id_sha1
    name = 'sha1'


class Sha224(HashAlgorithm):
    algorithm_oid = rfc5480.id_sha224
    name = 'sha224'


class Sha256(HashAlgorithm):
    algorithm_oid = rfc5480.id_sha256
    name = 'sha256'


class Sha384(HashAlgorithm):
    algorithm_oid = rfc5480.id_sha384
    name = 'sha384'


class Sha512(HashAlgorithm):
    algorithm_oid = rfc5480.id_sha512
    name = 'sha512'


_register(Md5, Sha1, Sha224, Sha256, Sha384, Sha512)


class PrfAlgorithm(AlgorithmIdentifier):
    """Identifiers usable as the pseudorandom function of PBKDF2."""


class HmacAlgorithm(PrfAlgorithm):
    hash_algorithm_cls = None

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return self.hash_algorithm_cls()

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'HmacAlgorithm':
        _verify_absent_or_null_parameters(cls.name, parameters)

        return cls()


class HmacWithSha1(HmacAlgorithm):
    algorithm_oid = rfc8018.id_hmacWithSHA1
    name = 'hmacWithSHA1'
    hash_algorithm_cls = Sha1

    # RFC 8018 B.1.1
    @property
    def parameters(self) -> Optional[bytes]:
        return _NULL_DER


class HmacWithSha224(HmacAlgorithm):
    algorithm_oid = rfc8018.id_hmacWithSHA224
    name = 'hmacWithSHA224'
    hash_algorithm_cls = Sha224


class HmacWithSha256(HmacAlgorithm):
    algorithm_oid = rfc8018.id_hmacWithSHA256
    name = 'hmacWithSHA256'
    hash_algorithm_cls = Sha256


class HmacWithSha384(HmacAlgorithm):
    algorithm_oid = rfc8018.id_hmacWithSHA384
    name = 'hmacWithSHA384'
    hash_algorithm_cls = Sha384


class HmacWithSha512(HmacAlgorithm):
    algorithm_oid = rfc8018.id_hmacWithSHA512
    name = 'hmacWithSHA512'
    hash_algorithm_cls = Sha512


_register(HmacWithSha1, HmacWithSha224, HmacWithSha256, HmacWithSha384, HmacWithSha512)


class CipherAlgorithm(AlgorithmIdentifier):
    key_size: int = None
    iv_size: int = None

    def __init__(self, iv: Optional[bytes] = None):
        _verify_iv_size(self.name, self.iv_size, iv)

        self._iv = iv

    @property
    def initialization_vector(self) -> Optional[bytes]:
        return self._iv

    def with_initialization_vector(self, iv: Optional[bytes]) -> 'CipherAlgorithm':
        _verify_iv_size(self.name, self.iv_size, iv)

        cipher = copy.copy(self)
        cipher._iv = iv

        return cipher

    @property
    def parameters(self) -> Optional[bytes]:
        if self._iv is None:
            return None

        return encode(univ.OctetString(self._iv))

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'CipherAlgorithm':
        if parameters is None:
            return cls()

        iv = decode_der(parameters, univ.OctetString())

        return cls(iv.asOctets())


class DesCbc(CipherAlgorithm):
    algorithm_oid = rfc8018.desCBC
    name = 'desCBC'
    key_size = 8
    iv_size = 8


class DesEde3Cbc(CipherAlgorithm):
    algorithm_oid = rfc8018.des_EDE3_CBC
    name = 'des-EDE3-CBC'
    key_size = 24
    iv_size = 8


class Rc2Cbc(CipherAlgorithm):
    algorithm_oid = rfc8018.rc2CBC
    name = 'rc2CBC'
    key_size = 16
    iv_size = 8

    # effective key bits implied by a parameter without rc2ParameterVersion
    IMPLICIT_EFFECTIVE_KEY_BITS = 32

    def __init__(self, iv: Optional[bytes] = None, effective_key_bits: int = 64):
        if (effective_key_bits != self.IMPLICIT_EFFECTIVE_KEY_BITS and effective_key_bits < 256 and
                effective_key_bits not in mappings.RC2_EFFECTIVE_KEY_BITS_TO_VERSION_MAPPINGS):
            raise errors.UnsupportedFeature(f'{effective_key_bits} effective key bits for RC2 not supported')

        super().__init__(iv)

        self._effective_key_bits = effective_key_bits

    @property
    def effective_key_bits(self) -> int:
        return self._effective_key_bits

    @property
    def parameters(self) -> Optional[bytes]:
        if self._iv is None:
            return None

        params = algorithm_asn1.RC2CBCParameter()

        if self._effective_key_bits >= 256:
            params['rc2ParameterVersion'] = self._effective_key_bits
        elif self._effective_key_bits != self.IMPLICIT_EFFECTIVE_KEY_BITS:
            params['rc2ParameterVersion'] = mappings.RC2_EFFECTIVE_KEY_BITS_TO_VERSION_MAPPINGS[
                self._effective_key_bits]

        params['iv'] = self._iv

        return encode(params)

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'Rc2Cbc':
        if parameters is None:
            return cls()

        params = decode_der(parameters, algorithm_asn1.RC2CBCParameter())

        if not params['rc2ParameterVersion'].isValue:
            effective_key_bits = cls.IMPLICIT_EFFECTIVE_KEY_BITS
        else:
            version = int(params['rc2ParameterVersion'])

            if version >= 256:
                effective_key_bits = version
            elif version in mappings.RC2_VERSION_TO_EFFECTIVE_KEY_BITS_MAPPINGS:
                effective_key_bits = mappings.RC2_VERSION_TO_EFFECTIVE_KEY_BITS_MAPPINGS[version]
            else:
                raise errors.UnsupportedFeature(f'RC2 parameter version {version} not supported')

        return cls(params['iv'].asOctets(), effective_key_bits)


class AesCbc(CipherAlgorithm):
    iv_size = 16


class Aes128Cbc(AesCbc):
    algorithm_oid = rfc3565.id_aes128_CBC
    name = 'aes128-CBC'
    key_size = 16


class Aes192Cbc(AesCbc):
    algorithm_oid = rfc3565.id_aes192_CBC
    name = 'aes192-CBC'
    key_size = 24


class Aes256Cbc(AesCbc):
    algorithm_oid = rfc3565.id_aes256_CBC
    name = 'aes256-CBC'
    key_size = 32


_register(DesCbc, DesEde3Cbc, Rc2Cbc, Aes128Cbc, Aes192Cbc, Aes256Cbc)


class Pbes1Algorithm(AlgorithmIdentifier):
    SALT_LENGTH = 8

    def __init__(self, salt: bytes, iteration_count: int):
        if len(salt) != self.SALT_LENGTH:
            raise errors.InvalidSaltLength(f'Salt length must be {self.SALT_LENGTH} octets, got {len(salt)}')

        if iteration_count < 1:
            raise errors.InvalidParameterValue(f'Iteration count must be positive, got {iteration_count}')

        self._salt = salt
        self._iteration_count = iteration_count

    @property
    def salt(self) -> bytes:
        return self._salt

    @property
    def iteration_count(self) -> int:
        return self._iteration_count

    @property
    def parameters(self) -> Optional[bytes]:
        params = algorithm_asn1.PBEParameter()
        params['salt'] = self._salt
        params['iterationCount'] = self._iteration_count

        return encode(params)

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'Pbes1Algorithm':
        if parameters is None:
            raise errors.MalformedStructure(f'"{cls.name}" requires parameters')

        params = decode_der(parameters, algorithm_asn1.PBEParameter())

        return cls(params['salt'].asOctets(), int(params['iterationCount']))


class PbeWithMd2AndDesCbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithMD2AndDES_CBC
    name = 'pbeWithMD2AndDES-CBC'


class PbeWithMd2AndRc2Cbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithMD2AndRC2_CBC
    name = 'pbeWithMD2AndRC2-CBC'


class PbeWithMd5AndDesCbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithMD5AndDES_CBC
    name = 'pbeWithMD5AndDES-CBC'


class PbeWithMd5AndRc2Cbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithMD5AndRC2_CBC
    name = 'pbeWithMD5AndRC2-CBC'


class PbeWithSha1AndDesCbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithSHA1AndDES_CBC
    name = 'pbeWithSHA1AndDES-CBC'


class PbeWithSha1AndRc2Cbc(Pbes1Algorithm):
    algorithm_oid = rfc8018.pbeWithSHA1AndRC2_CBC
    name = 'pbeWithSHA1AndRC2-CBC'


_register(PbeWithMd2AndDesCbc, PbeWithMd2AndRc2Cbc, PbeWithMd5AndDesCbc, PbeWithMd5AndRc2Cbc,
          PbeWithSha1AndDesCbc, PbeWithSha1AndRc2Cbc)


class Pbkdf2(AlgorithmIdentifier):
    algorithm_oid = rfc8018.id_PBKDF2
    name = 'pBKDF2'

    def __init__(self, salt: bytes, iteration_count: int, key_length: Optional[int] = None,
                 prf_algorithm: Optional[PrfAlgorithm] = None):
        if iteration_count < 1:
            raise errors.InvalidParameterValue(f'Iteration count must be positive, got {iteration_count}')

        if key_length is not None and key_length < 1:
            raise errors.InvalidParameterValue(f'Key length must be positive, got {key_length}')

        if prf_algorithm is None:
            prf_algorithm = HmacWithSha1()
        elif not isinstance(prf_algorithm, PrfAlgorithm):
            raise errors.IncompatibleAlgorithm(
                f'"{prf_algorithm.name}" is not supported as a pseudorandom function')

        self._salt = salt
        self._iteration_count = iteration_count
        self._key_length = key_length
        self._prf_algorithm = prf_algorithm

    @property
    def salt(self) -> bytes:
        return self._salt

    @property
    def iteration_count(self) -> int:
        return self._iteration_count

    @property
    def key_length(self) -> Optional[int]:
        return self._key_length

    @property
    def prf_algorithm(self) -> PrfAlgorithm:
        return self._prf_algorithm

    @property
    def parameters(self) -> Optional[bytes]:
        params = algorithm_asn1.PBKDF2Params()
        params['salt']['specified'] = self._salt
        params['iterationCount'] = self._iteration_count

        if self._key_length is not None:
            params['keyLength'] = self._key_length

        # prf DEFAULT algid-hmacWithSHA1
        if self._prf_algorithm.algorithm_oid != rfc8018.id_hmacWithSHA1:
            params['prf'] = self._prf_algorithm.encode()

        return encode(params)

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'Pbkdf2':
        if parameters is None:
            raise errors.MalformedStructure(f'"{cls.name}" requires parameters')

        params = decode_der(parameters, algorithm_asn1.PBKDF2Params())

        salt_source = params['salt']

        if salt_source.getName() == 'otherSource':
            decode_algorithm_identifier(salt_source['otherSource'])

            raise errors.UnsupportedFeature('otherSource not implemented')

        key_length = int(params['keyLength']) if params['keyLength'].isValue else None
        prf_algorithm = decode_algorithm_identifier(params['prf']) if params['prf'].isValue else None

        return cls(salt_source['specified'].asOctets(), int(params['iterationCount']), key_length, prf_algorithm)


class Pbes2(AlgorithmIdentifier):
    algorithm_oid = rfc8018.id_PBES2
    name = 'pkcs5PBES2'

    def __init__(self, kdf_algorithm: Pbkdf2, encryption_scheme: CipherAlgorithm):
        if not isinstance(kdf_algorithm, Pbkdf2):
            raise errors.IncompatibleAlgorithm(f'"{kdf_algorithm.name}" is not supported as a PBES2 KDF')

        if not isinstance(encryption_scheme, CipherAlgorithm):
            raise errors.IncompatibleAlgorithm(
                f'"{encryption_scheme.name}" is not supported as a PBES2 encryption scheme')

        self._kdf_algorithm = kdf_algorithm
        self._encryption_scheme = encryption_scheme

    @property
    def kdf_algorithm(self) -> Pbkdf2:
        return self._kdf_algorithm

    @property
    def encryption_scheme(self) -> CipherAlgorithm:
        return self._encryption_scheme

    @property
    def parameters(self) -> Optional[bytes]:
        params = algorithm_asn1.PBES2Params()
        params['keyDerivationFunc'] = self._kdf_algorithm.encode()
        params['encryptionScheme'] = self._encryption_scheme.encode()

        return encode(params)

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'Pbes2':
        if parameters is None:
            raise errors.MalformedStructure(f'"{cls.name}" requires parameters')

        params = decode_der(parameters, algorithm_asn1.PBES2Params())

        return cls(decode_algorithm_identifier(params['keyDerivationFunc']),
                   decode_algorithm_identifier(params['encryptionScheme']))


_register(Pbkdf2, Pbes2)


class RsaEncryption(AlgorithmIdentifier):
    algorithm_oid = rfc5480.rsaEncryption
    name = 'rsaEncryption'

    # RFC 3279 2.3.1
    @property
    def parameters(self) -> Optional[bytes]:
        return _NULL_DER

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'RsaEncryption':
        _verify_absent_or_null_parameters(cls.name, parameters)

        return cls()


class EcPublicKey(AlgorithmIdentifier):
    algorithm_oid = rfc5480.id_ecPublicKey
    name = 'ecPublicKey'

    def __init__(self, named_curve: Optional[str] = None):
        if named_curve is not None:
            try:
                named_curve = str(univ.ObjectIdentifier(named_curve))
            except PyAsn1Error as e:
                raise errors.InvalidParameterValue(f'Invalid named curve "{named_curve}"') from e

        self._named_curve = named_curve

    @property
    def named_curve(self) -> Optional[str]:
        return self._named_curve

    @property
    def curve_size(self) -> Optional[int]:
        return mappings.CURVE_TO_SIZE_MAPPINGS.get(self._named_curve)

    @property
    def parameters(self) -> Optional[bytes]:
        if self._named_curve is None:
            return None

        return encode(univ.ObjectIdentifier(self._named_curve))

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'EcPublicKey':
        if parameters is None:
            return cls()

        # ECParameters ::= CHOICE { namedCurve, implicitCurve NULL, specifiedCurve SEQUENCE }
        # rfc5480.ECParameters models namedCurve only, so the CHOICE is told apart by its tag octet
        if parameters[:1] != b'\x06':
            raise errors.UnsupportedFeature('Only namedCurve EC parameters are supported')

        return cls(decode_der(parameters, univ.ObjectIdentifier()))


_register(RsaEncryption, EcPublicKey)


class SignatureAlgorithm(AlgorithmIdentifier):
    hash_algorithm_cls = None
    key_algorithm_oid: univ.ObjectIdentifier = None

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return self.hash_algorithm_cls()

    def supports_key_algorithm(self, key_algorithm: AlgorithmIdentifier) -> bool:
        return key_algorithm.algorithm_oid == self.key_algorithm_oid


class RsaSignatureAlgorithm(SignatureAlgorithm):
    """PKCS #1 v1.5 signature identifier.

    RFC 4055 section 5 requires NULL parameters but implementations must accept
    absent parameters as well, so whatever was decoded is kept and re-encoded
    as is. Identifiers built without parameters, or decoded from an encoding
    that omitted them, carry NULL.
    """
    key_algorithm_oid = rfc5480.rsaEncryption

    def __init__(self, parameters: Optional[bytes] = None):
        self._parameters = _NULL_DER if parameters is None else parameters

    @property
    def parameters(self) -> Optional[bytes]:
        return self._parameters

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'RsaSignatureAlgorithm':
        return cls(parameters)


class Md5WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc5480.md5WithRSAEncryption
    name = 'md5WithRSAEncryption'
    hash_algorithm_cls = Md5


class Sha1WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc5480.sha1WithRSAEncryption
    name = 'sha1WithRSAEncryption'
    hash_algorithm_cls = Sha1


class Sha224WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc4055.sha224WithRSAEncryption
    name = 'sha224WithRSAEncryption'
    hash_algorithm_cls = Sha224


class Sha256WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc4055.sha256WithRSAEncryption
    name = 'sha256WithRSAEncryption'
    hash_algorithm_cls = Sha256


class Sha384WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc4055.sha384WithRSAEncryption
    name = 'sha384WithRSAEncryption'
    hash_algorithm_cls = Sha384


class Sha512WithRsaEncryption(RsaSignatureAlgorithm):
    algorithm_oid = rfc4055.sha512WithRSAEncryption
    name = 'sha512WithRSAEncryption'
    hash_algorithm_cls = Sha512


_register(Md5WithRsaEncryption, Sha1WithRsaEncryption, Sha224WithRsaEncryption, Sha256WithRsaEncryption,
          Sha384WithRsaEncryption, Sha512WithRsaEncryption)


# RFC 5758 3.2: the encoding MUST omit the parameters field
class EcdsaSignatureAlgorithm(SignatureAlgorithm):
    key_algorithm_oid = rfc5480.id_ecPublicKey

    @classmethod
    def from_parameters(cls, parameters: Optional[bytes]) -> 'EcdsaSignatureAlgorithm':
        return cls()


class EcdsaWithSha1(EcdsaSignatureAlgorithm):
    algorithm_oid = rfc5480.ecdsa_with_SHA1
    name = 'ecdsa-with-SHA1'
    hash_algorithm_cls = Sha1


class EcdsaWithSha224(EcdsaSignatureAlgorithm):
    algorithm_oid = rfc5480.ecdsa_with_SHA224
    name = 'ecdsa-with-SHA224'
    hash_algorithm_cls = Sha224


class EcdsaWithSha256(EcdsaSignatureAlgorithm):
    algorithm_oid = rfc5480.ecdsa_with_SHA256
    name = 'ecdsa-with-SHA256'
    hash_algorithm_cls = Sha256


class EcdsaWithSha384(EcdsaSignatureAlgorithm):
    algorithm_oid = rfc5480.ecdsa_with_SHA384
    name = 'ecdsa-with-SHA384'
    hash_algorithm_cls = Sha384


class EcdsaWithSha512(EcdsaSignatureAlgorithm):
    algorithm_oid = rfc5480.ecdsa_with_SHA512
    name = 'ecdsa-with-SHA512'
    hash_algorithm_cls = Sha512


_register(EcdsaWithSha1, EcdsaWithSha224, EcdsaWithSha256, EcdsaWithSha384, EcdsaWithSha512)
