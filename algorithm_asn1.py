from pyasn1.type import univ, namedtype
from pyasn1_modules import rfc5280, rfc8018


# RFC 8018 A.3. salt is unconstrained here, its length is checked by PBES1 identifiers
class PBEParameter(univ.Sequence):
    pass


PBEParameter.componentType = namedtype.NamedTypes(
    namedtype.NamedType('salt', univ.OctetString()),
    namedtype.NamedType('iterationCount', univ.Integer())
)


class PBKDF2SaltSource(univ.Choice):
    pass


PBKDF2SaltSource.componentType = namedtype.NamedTypes(
    namedtype.NamedType('specified', univ.OctetString()),
    namedtype.NamedType('otherSource', rfc5280.AlgorithmIdentifier())
)


# RFC 8018 A.2, with prf OPTIONAL rather than DEFAULT
class PBKDF2Params(univ.Sequence):
    pass


PBKDF2Params.componentType = namedtype.NamedTypes(
    namedtype.NamedType('salt', PBKDF2SaltSource()),
    namedtype.NamedType('iterationCount', univ.Integer()),
    namedtype.OptionalNamedType('keyLength', univ.Integer()),
    namedtype.OptionalNamedType('prf', rfc5280.AlgorithmIdentifier())
)


PBES2Params = rfc8018.PBES2_params


# RFC 8018 B.2.3, iv unconstrained
class RC2CBCParameter(univ.Sequence):
    pass


RC2CBCParameter.componentType = namedtype.NamedTypes(
    namedtype.OptionalNamedType('rc2ParameterVersion', univ.Integer()),
    namedtype.NamedType('iv', univ.OctetString())
)
