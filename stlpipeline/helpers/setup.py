from copy import copy
from typing import Any, Dict


class ConfigurationBuilder:
    """
        A builder base class for setting configuration parameters using a fluent interface pattern.
        Each setter method allows chaining by returning the instance itself.

        Subclasses declare their parameters in FIELDS (name -> default). A parameter left
        at None is "not set" and is derived when the configuration is consumed.
    """

    FIELDS: Dict[str, Any] = {}

    def __init__(self):
        for name, default in self.FIELDS.items():
            setattr(self, name, default)

    def __str__(self) -> str:
        values = ", ".join(f"{name}={getattr(self, name)}" for name in self.FIELDS)
        return f"{self.__class__.__name__}({values})"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def _set(self, name: str, value: Any):
        if name not in self.FIELDS:
            raise AttributeError(f"{self.__class__.__name__} has no parameter '{name}'")
        setattr(self, name, value)
        return self

    def copy(self):
        """Shallow copy, so setters on the copy leave this configuration untouched."""
        return copy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.FIELDS}
