from pyasn1_modules import rfc4055, rfc5480

HASH_TO_RSA_SIGNATURE_MAPPINGS = {
    str(rfc5480.id_md5): str(rfc5480.md5WithRSAEncryption),
    str(rfc5480.id_sha1): str(rfc5480.sha1WithRSAEncryption),
    str(rfc5480.id_sha224): str(rfc4055.sha224WithRSAEncryption),
    str(rfc5480.id_sha256): str(rfc4055.sha256WithRSAEncryption),
    str(rfc5480.id_sha384): str(rfc4055.sha384WithRSAEncryption),
    str(rfc5480.id_sha512): str(rfc4055.sha512WithRSAEncryption),
}


HASH_TO_ECDSA_SIGNATURE_MAPPINGS = {
    str(rfc5480.id_sha1): str(rfc5480.ecdsa_with_SHA1),
    str(rfc5480.id_sha224): str(rfc5480.ecdsa_with_SHA224),
    str(rfc5480.id_sha256): str(rfc5480.ecdsa_with_SHA256),
    str(rfc5480.id_sha384): str(rfc5480.ecdsa_with_SHA384),
    str(rfc5480.id_sha512): str(rfc5480.ecdsa_with_SHA512),
}


KEY_ALGORITHM_TO_SIGNATURE_MAPPINGS = {
    str(rfc5480.rsaEncryption): HASH_TO_RSA_SIGNATURE_MAPPINGS,
    str(rfc5480.id_ecPublicKey): HASH_TO_ECDSA_SIGNATURE_MAPPINGS,
}


CURVE_TO_SIZE_MAPPINGS = {
    str(rfc5480.secp192r1): 192,
    str(rfc5480.sect163k1): 163,
    str(rfc5480.sect163r2): 163,
    str(rfc5480.secp224r1): 224,
    str(rfc5480.sect233k1): 233,
    str(rfc5480.sect233r1): 233,
    str(rfc5480.secp256r1): 256,
    str(rfc5480.sect283k1): 283,
    str(rfc5480.sect283r1): 283,
    str(rfc5480.secp384r1): 384,
    str(rfc5480.sect409k1): 409,
    str(rfc5480.sect409r1): 409,
    str(rfc5480.secp521r1): 521,
    str(rfc5480.sect571k1): 571,
    str(rfc5480.sect571r1): 571,
}


# RFC 2268 effective key bits <-> RC2 parameter version, for the sizes in use
RC2_EFFECTIVE_KEY_BITS_TO_VERSION_MAPPINGS = {
    40: 160,
    64: 120,
    128: 58,
}


RC2_VERSION_TO_EFFECTIVE_KEY_BITS_MAPPINGS = {
    v: k for k, v in RC2_EFFECTIVE_KEY_BITS_TO_VERSION_MAPPINGS.items()
}
