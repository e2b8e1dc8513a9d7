# error types shared by the generator
class AccessLogGenError(Exception):
    pass

class RandomSourceError(AccessLogGenError):
    """A single draw from an integer source failed."""

class InvalidDistributionError(AccessLogGenError, ValueError):
    """Choice weights do not describe a distribution (empty, negative or zero total)."""

class ConfigError(AccessLogGenError, ValueError):
    pass
