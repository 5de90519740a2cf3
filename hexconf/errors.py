class ConfigError(Exception):
    """Base class for every failure of a translation."""

    def __init__(self, line, column, message):
        super().__init__(f"Parse error at {line}:{column}: {message}")
        self.line = line
        self.column = column
        self.message = message


class LexError(ConfigError):
    pass


class ParseError(ConfigError):
    pass


class EvaluationError(ConfigError):
    """Raised while resolving bindings; these carry no source position."""

    def __init__(self, message, name):
        super().__init__(0, 0, message)
        self.name = name


class UnknownConstantError(EvaluationError):
    def __init__(self, name):
        super().__init__(f"Unknown constant: {name}", name)


class CyclicDependencyError(EvaluationError):
    def __init__(self, name):
        super().__init__(f"Cyclic constant dependency detected: {name}", name)
