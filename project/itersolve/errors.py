"""
Errors raised by stop criteria.

Both signal programming mistakes. A numerical failure of the calculation
itself is reported through CalculationStatus.FAILED instead.
"""


class InvalidConfiguration(ValueError):
    """A stop criterion was given a setting outside its domain."""

    def __init__(self, name: str, value: object, requirement: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} {requirement}, got {value!r}")


class InvalidArgument(ValueError):
    """A stop criterion was called with an argument it cannot accept."""

    def __init__(self, name: str, value: object, requirement: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} {requirement}, got {value!r}")
