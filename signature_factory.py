import algorithm_identifier
import errors
import mappings


def for_asymmetric_crypto(crypto_algorithm: algorithm_identifier.AlgorithmIdentifier,
                          hash_algorithm: algorithm_identifier.AlgorithmIdentifier
                          ) -> algorithm_identifier.SignatureAlgorithm:
    hash_to_signature = mappings.KEY_ALGORITHM_TO_SIGNATURE_MAPPINGS.get(crypto_algorithm.oid)

    if hash_to_signature is None:
        raise errors.UnsupportedCombination(
            f'Crypto algorithm "{crypto_algorithm.name}" not supported for signing with "{hash_algorithm.name}"')

    signature_oid = hash_to_signature.get(hash_algorithm.oid)

    if signature_oid is None:
        raise errors.UnsupportedCombination(
            f'No "{crypto_algorithm.name}" signature algorithm for "{hash_algorithm.name}"')

    return algorithm_identifier.get_algorithm_class(signature_oid)()
