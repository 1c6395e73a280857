"""Exceptions raised by the traffic simulator."""


class InvalidParameter(ValueError):
    """A model or configuration parameter is outside its valid range."""


class UnknownModel(ValueError):
    """A traffic model selector could not be resolved."""
