import functools
import inspect
import logging
import types
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ._assembler import assemble_request
from ._descriptor import MethodDescriptor, descriptor_of
from ._dispatch import RestCall, dispatch_async, dispatch_blocking
from ._params import ParameterMarker, ParameterRole
from ._registry import ParameterRegistry, registry_for
from ._utils._endpoint import UrlTemplate
from ._utils.constants import DESCRIPTOR_ATTRIBUTE
from .models.exceptions import DescriptorError

logger = logging.getLogger("declarest")


def _marker_of(annotation: Any) -> Optional[ParameterMarker]:
    if get_origin(annotation) is Union:
        # get_type_hints wraps None defaults in Optional before Python 3.11
        for arg in get_args(annotation):
            marker = _marker_of(arg)
            if marker is not None:
                return marker
        return None

    if get_origin(annotation) is not Annotated:
        return None

    markers = [
        arg for arg in get_args(annotation)[1:] if isinstance(arg, ParameterMarker)
    ]
    if len(markers) > 1:
        raise ValueError(f"more than one parameter marker in {annotation!r}")
    return markers[0] if markers else None


class RestMethod:
    """Service method whose calls are turned into HTTP requests.

    Created by the verb decorators (:func:`get`, :func:`post_async`, ...). The
    parameter bindings are recorded into the owning class registry when the
    class body is executed; the decorated function itself is never run.
    """

    def __init__(
        self, func: Callable[..., Any], descriptor: MethodDescriptor
    ) -> None:
        functools.update_wrapper(self, func)
        self._func = func
        self._signature = inspect.signature(func)
        self._parameters = list(self._signature.parameters.values())[1:]
        self._registry: Optional[ParameterRegistry] = None
        self._owner: Optional[type] = None
        self.descriptor = descriptor
        setattr(self, DESCRIPTOR_ATTRIBUTE, descriptor)

    def __repr__(self) -> str:
        return (
            f"RestMethod({self.descriptor.name!r}, {self.descriptor.verb} "
            f"{self.descriptor.url_template!r})"
        )

    def __set_name__(self, owner: type, name: str) -> None:
        self.descriptor.name = name
        self._owner = owner

    def register(self, owner: type, name: str) -> ParameterRegistry:
        """Records the parameter bindings into the registry of ``owner``.

        Raises:
            DescriptorError: If the declaration is inconsistent.
        """
        if self._registry is not None:
            return self._registry

        registry = registry_for(owner)
        for role, key, index in self._collect_bindings(name):
            registry.record(name, role, key, index)

        self._validate(registry, name)
        self._registry = registry
        return registry

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, service: Any, *args: Any, **kwargs: Any) -> Any:
        if self._owner is None:
            raise DescriptorError(
                self.descriptor.name, "must be declared in a class body"
            )

        registry = self._registry or register_methods(self._owner)
        self.descriptor.freeze()

        arguments = self._arguments(service, args, kwargs)

        def assemble():
            return assemble_request(
                self.descriptor,
                registry,
                service.base_url,
                service.default_headers,
                arguments,
            )

        if self.descriptor.blocking:
            return dispatch_blocking(self.descriptor, assemble(), service.transport)

        async def dispatch():
            # assembled again for every dispatch
            return await dispatch_async(self.descriptor, assemble(), service.transport)

        return RestCall(dispatch, name=self.descriptor.name)

    def _arguments(
        self, service: Any, args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> List[Any]:
        bound = self._signature.bind(service, *args, **kwargs)
        bound.apply_defaults()
        return [bound.arguments.get(p.name) for p in self._parameters]

    def _annotations(self, name: str) -> Dict[str, Any]:
        annotations = {p.name: p.annotation for p in self._parameters}
        if not any(isinstance(a, str) for a in annotations.values()):
            return annotations

        try:
            hints = get_type_hints(self._func, include_extras=True)
        except (NameError, TypeError) as e:
            raise DescriptorError(name, f"cannot resolve annotations ({e})") from e
        return {p.name: hints.get(p.name) for p in self._parameters}

    def _collect_bindings(self, name: str) -> List[Tuple[ParameterRole, str, int]]:
        annotations = self._annotations(name)

        bindings = []
        for index, parameter in enumerate(self._parameters):
            try:
                marker = _marker_of(annotations[parameter.name])
            except ValueError as e:
                raise DescriptorError(name, str(e)) from e
            if marker is None:
                continue

            if parameter.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                raise DescriptorError(
                    name, f"'{parameter.name}' cannot be bound, it is variadic"
                )

            bindings.append((marker.role, marker.key or parameter.name, index))
        return bindings

    def _validate(self, registry: ParameterRegistry, name: str) -> None:
        path_keys = {b.key for b in registry.lookup(name, ParameterRole.PATH)}
        for placeholder in UrlTemplate(self.descriptor.url_template).placeholders:
            if placeholder not in path_keys:
                raise DescriptorError(
                    name, f"placeholder '{{{placeholder}}}' has no Path parameter"
                )

        if self.descriptor.is_form_data and not self._parameters:
            raise DescriptorError(name, "form data methods need an argument")

        mock = self.descriptor.mockup
        if (
            self.descriptor.blocking
            and mock is not None
            and inspect.iscoroutinefunction(mock.handler)
        ):
            raise DescriptorError(
                name, "blocking methods cannot use a coroutine mockup handler"
            )

        if len(registry.lookup(name, ParameterRole.BODY)) > 1:
            logger.warning(
                f"{name} declares several Body parameters, only the first is sent"
            )


def register_methods(owner: type) -> ParameterRegistry:
    """Records the bindings of every method declared on ``owner``, then freezes.

    Called once the class body has been executed; later calls only return the
    frozen registry.
    """
    registry = registry_for(owner)
    if not registry.frozen:
        for name, attribute in list(vars(owner).items()):
            if isinstance(attribute, RestMethod):
                attribute.register(owner, name)
        registry.freeze()
    return registry


def _method_builder(
    verb: str, blocking: bool
) -> Callable[..., Callable[[Any], RestMethod]]:
    def builder(url: str = "") -> Callable[[Any], RestMethod]:
        def decorator(func: Callable[..., Any]) -> RestMethod:
            descriptor = descriptor_of(func)
            if descriptor.verb is not None:
                raise DescriptorError(
                    func.__name__, f"already declared as {descriptor.verb}"
                )
            descriptor.verb = verb
            descriptor.url_template = url
            descriptor.blocking = blocking
            return RestMethod(func, descriptor)

        return decorator

    builder.__name__ = f"{verb.lower()}{'' if blocking else '_async'}"
    builder.__doc__ = (
        f"Declares a {'blocking' if blocking else 'lazy asynchronous'} "
        f"{verb} request on ``url``."
    )
    return builder


get = _method_builder("GET", blocking=True)
post = _method_builder("POST", blocking=True)
put = _method_builder("PUT", blocking=True)
patch = _method_builder("PATCH", blocking=True)
delete = _method_builder("DELETE", blocking=True)
head = _method_builder("HEAD", blocking=True)
options = _method_builder("OPTIONS", blocking=True)

get_async = _method_builder("GET", blocking=False)
post_async = _method_builder("POST", blocking=False)
put_async = _method_builder("PUT", blocking=False)
patch_async = _method_builder("PATCH", blocking=False)
delete_async = _method_builder("DELETE", blocking=False)
head_async = _method_builder("HEAD", blocking=False)
options_async = _method_builder("OPTIONS", blocking=False)
