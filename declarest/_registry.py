from collections import defaultdict
from typing import Dict, List, Tuple

from ._params import ParameterBinding, ParameterRole
from .models.exceptions import DescriptorError, RegistryFrozenError

REGISTRY_ATTRIBUTE = "_declarest_registry"


class ParameterRegistry:
    """Per-class record of which role every method argument plays.

    The registry has two phases. While the owning class body is executed,
    bindings are recorded; once the class is created the registry is frozen
    and only lookups remain, which makes it safe to share between instances
    and concurrent calls without locking.
    """

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self._bindings: Dict[Tuple[str, ParameterRole], List[ParameterBinding]] = (
            defaultdict(list)
        )
        self._frozen = False

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def frozen(self) -> bool:
        return self._frozen

    def record(
        self, method_name: str, role: ParameterRole, key: str, index: int
    ) -> ParameterBinding:
        """Appends a binding to the ordered list of ``(method_name, role)``.

        Raises:
            RegistryFrozenError: If the registry has already been frozen.
            DescriptorError: If the argument index is negative or already
                bound under the same role.
        """
        if self._frozen:
            raise RegistryFrozenError(self._owner, method_name)

        if index < 0:
            raise DescriptorError(method_name, f"negative argument index {index}")

        bindings = self._bindings[(method_name, role)]
        if any(binding.index == index for binding in bindings):
            raise DescriptorError(
                method_name, f"argument {index} is bound twice as {role.value}"
            )

        binding = ParameterBinding(role=role, key=key, index=index)
        bindings.append(binding)
        return binding

    def lookup(
        self, method_name: str, role: ParameterRole
    ) -> Tuple[ParameterBinding, ...]:
        return tuple(self._bindings.get((method_name, role), ()))

    def methods(self) -> List[str]:
        return sorted({method_name for method_name, _ in self._bindings})

    def freeze(self) -> None:
        self._frozen = True

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"ParameterRegistry({self._owner!r}, {state})"


def registry_for(owner: type) -> ParameterRegistry:
    """Returns the registry owned by ``owner``, creating it on first use.

    Subclasses never share their parent's registry: each class only records
    the methods declared in its own body.
    """
    registry = owner.__dict__.get(REGISTRY_ATTRIBUTE)
    if registry is None:
        registry = ParameterRegistry(owner.__qualname__)
        setattr(owner, REGISTRY_ATTRIBUTE, registry)
    return registry
