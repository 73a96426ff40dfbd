"""Exceptions raised by the simulation."""


class PartSimError(Exception):
    """Base class for every error raised by PartSim."""


class InvalidArgument(PartSimError, ValueError):
    """A call received an argument outside its accepted domain."""


class InvalidConfiguration(PartSimError, ValueError):
    """A machine or order definition cannot be simulated."""
