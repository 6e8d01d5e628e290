from abc import ABC, abstractmethod

from evoselect.population.protocol import Population


class Selector(ABC):
    """Base class for configured selection procedures.

    A selector holds only its parameters; every call is an independent pass
    over the population and returns the ids of the offspring it produced.
    """

    @abstractmethod
    def __call__(self, population: Population) -> list[int]:
        """Run one selection pass and return the new offspring ids."""

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"
