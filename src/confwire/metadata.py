from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from inspect import Parameter
from typing import Any, Protocol, get_type_hints, runtime_checkable

from confwire.exceptions import DependencyInferenceError
from confwire.types import RegistrationKey

logger = logging.getLogger(__name__)

_NONE_RETURN_TYPES = (None, type(None))


@runtime_checkable
class TypeMetadataProvider(Protocol):
    """Supply declared parameter and return types for members of a class.

    The container and the factory resolver never inspect annotations
    themselves; they ask a provider, so resolution stays deterministic and can
    be driven by hand-written metadata in tests.
    """

    def parameter_types_of(self, owner: Any, name: str) -> tuple[RegistrationKey, ...]:
        """Return the ordered parameter types of ``owner.name`` or ``()`` if unknown."""
        ...

    def return_type_of(self, owner: Any, name: str) -> RegistrationKey | None:
        """Return the declared return type of ``owner.name`` or ``None`` if unknown."""
        ...


class AnnotationMetadataProvider:
    """Read parameter and return types from Python type annotations.

    The implicit ``self``/``cls`` parameter of methods and ``*args``/``**kwargs``
    are skipped. Collection stops at the first unannotated parameter that has a
    default value, so trailing optional parameters keep their defaults.
    """

    def parameter_types_of(self, owner: Any, name: str) -> tuple[RegistrationKey, ...]:
        found = self._find_callable(owner, name)
        if found is None:
            return ()
        function, skip_first_parameter = found

        parameters = self._parameters(function)
        if parameters is None:
            return ()
        if skip_first_parameter:
            parameters = parameters[1:]

        hints = self._type_hints(function)
        provider_name = f"{getattr(owner, '__qualname__', owner)}.{name}"
        types: list[RegistrationKey] = []
        for parameter in parameters:
            if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                continue

            annotation = hints.get(parameter.name, parameter.annotation)
            has_default = parameter.default is not Parameter.empty
            if parameter.kind is Parameter.KEYWORD_ONLY:
                if has_default:
                    continue
                msg = (
                    f"Keyword-only parameter '{parameter.name}' of '{provider_name}' "
                    "cannot be injected positionally. Give it a default value."
                )
                raise DependencyInferenceError(msg)

            if annotation is Parameter.empty or isinstance(annotation, str):
                if has_default:
                    break
                msg = (
                    f"Unable to infer dependency for required parameter '{parameter.name}' "
                    f"of '{provider_name}'. Add a type annotation or declare it with @inject(...)."
                )
                raise DependencyInferenceError(msg)

            types.append(annotation)

        return tuple(types)

    def return_type_of(self, owner: Any, name: str) -> RegistrationKey | None:
        found = self._find_callable(owner, name)
        if found is None:
            return None
        function, _ = found

        return_type = self._type_hints(function).get("return", Parameter.empty)
        if return_type is Parameter.empty:
            return_type = getattr(function, "__annotations__", {}).get("return", Parameter.empty)

        if return_type is Parameter.empty or isinstance(return_type, str):
            return None
        if return_type in _NONE_RETURN_TYPES:
            return None
        return return_type

    def declares_return_type(self, function: Callable[..., Any]) -> bool:
        """Tell whether ``function`` carries a return annotation other than ``None``.

        Works on a bare function before its class exists; string annotations
        are accepted without being evaluated.
        """
        return_type = getattr(function, "__annotations__", {}).get("return", Parameter.empty)
        if return_type is Parameter.empty or return_type == "None":
            return False
        return return_type not in _NONE_RETURN_TYPES

    def _find_callable(
        self,
        owner: Any,
        name: str,
    ) -> tuple[Callable[..., Any], bool] | None:
        try:
            member = inspect.getattr_static(owner, name)
        except AttributeError:
            return None

        if isinstance(member, staticmethod):
            return member.__func__, False
        if isinstance(member, classmethod):
            return member.__func__, True
        if inspect.isfunction(member):
            return member, True
        # slot wrappers such as ``object.__init__`` carry no annotations
        return None

    def _parameters(self, function: Callable[..., Any]) -> list[Parameter] | None:
        try:
            signature = inspect.signature(function)
        except (TypeError, ValueError):
            return None
        except NameError as e:
            msg = f"Unable to read the signature of '{function.__qualname__}': {e}"
            raise DependencyInferenceError(msg) from e
        return list(signature.parameters.values())

    def _type_hints(self, function: Callable[..., Any]) -> dict[str, Any]:
        try:
            return get_type_hints(function)
        except (NameError, TypeError) as e:
            logger.debug(
                "Falling back to raw annotations for %s (%s)",
                function.__qualname__,
                e,
            )
            return {}


class StaticMetadataProvider:
    """Serve parameter and return types from explicit mappings.

    Keys of both mappings are ``(owner, member_name)`` pairs.

    Examples:
        .. code-block:: python

            provider = StaticMetadataProvider(
                parameter_types={(Config, "make_repo"): (Database,)},
                return_types={(Config, "make_repo"): Repository},
            )

    """

    def __init__(
        self,
        parameter_types: Mapping[tuple[Any, str], Sequence[RegistrationKey]] | None = None,
        return_types: Mapping[tuple[Any, str], RegistrationKey] | None = None,
    ) -> None:
        self._parameter_types = {
            member: tuple(types) for member, types in (parameter_types or {}).items()
        }
        self._return_types = dict(return_types or {})

    def set_parameter_types(
        self,
        owner: Any,
        name: str,
        types: Sequence[RegistrationKey],
    ) -> None:
        self._parameter_types[owner, name] = tuple(types)

    def set_return_type(self, owner: Any, name: str, return_type: RegistrationKey) -> None:
        self._return_types[owner, name] = return_type

    def parameter_types_of(self, owner: Any, name: str) -> tuple[RegistrationKey, ...]:
        return self._parameter_types.get((owner, name), ())

    def return_type_of(self, owner: Any, name: str) -> RegistrationKey | None:
        return self._return_types.get((owner, name))
