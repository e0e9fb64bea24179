class AlgorithmError(ValueError):
    pass


class ParameterError(AlgorithmError):
    pass


class MalformedStructure(ParameterError):
    pass


class InvalidParameterValue(ParameterError):
    pass


class InvalidIVSize(InvalidParameterValue):
    pass


class InvalidSaltLength(InvalidParameterValue):
    pass


class UnsupportedFeature(ParameterError):
    pass


class UnknownAlgorithm(AlgorithmError):
    pass


class IncompatibleAlgorithm(AlgorithmError):
    pass


class UnsupportedCombination(AlgorithmError):
    pass


class UnsupportedVersion(AlgorithmError):
    pass


class EngineFailure(AlgorithmError):
    pass
