"""
Registry mixin for name-based lookup of implementation classes.

Classes inheriting from :class:`RegistryMixin` gain a private registry and a
``register`` decorator so implementations can be selected by name from
configuration or the command line.

Example:
::
    class Capability(RegistryMixin["type[Capability]"]):
        ...

    @Capability.register("mock")
    class MockCapability(Capability):
        ...

    Capability.get_registered_object("mock")  # MockCapability
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

__all__ = ["RegistryMixin", "RegistryObjT"]

RegistryObjT = TypeVar("RegistryObjT", bound=Any)
"""Generic type variable for objects managed by the registry system."""


class RegistryMixin(Generic[RegistryObjT]):
    """
    Mixin providing a per-base-class registry of named objects.

    The registry is created lazily on the first class that registers an object,
    so subclasses of a registering base share the base's registry.

    :cvar registry: Mapping of lowercase names to registered objects
    """

    registry: ClassVar[dict[str, Any] | None] = None

    @classmethod
    def register(
        cls, name: str | list[str] | None = None
    ) -> Callable[[RegistryObjT], RegistryObjT]:
        """
        Decorator registering an object under one or more names.

        :param name: Name or names to register under; defaults to the object name
        :return: Decorator returning the object unchanged
        """

        def _decorator(obj: RegistryObjT) -> RegistryObjT:
            cls.register_decorator(obj, name=name)
            return obj

        return _decorator

    @classmethod
    def register_decorator(
        cls, obj: RegistryObjT, name: str | list[str] | None = None
    ) -> RegistryObjT:
        """
        Register an object directly.

        :param obj: Object to register
        :param name: Name or names to register under; defaults to the object name
        :return: The registered object
        :raises ValueError: If a name is already registered
        """
        names = [name] if isinstance(name, str) else name or [obj.__name__]

        if cls.registry is None:
            cls.registry = {}

        for key in names:
            key_lower = key.lower()
            if key_lower in cls.registry:
                raise ValueError(
                    f"{cls.__name__} already has an object registered as '{key}'"
                )
            cls.registry[key_lower] = obj

        return obj

    @classmethod
    def registered_names(cls) -> list[str]:
        """
        :return: Names of all registered objects, in registration order
        """
        return list(cls.registry or {})

    @classmethod
    def registered_objects(cls) -> tuple[RegistryObjT, ...]:
        """
        :return: All registered objects, in registration order
        """
        return tuple((cls.registry or {}).values())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """
        :param name: Name to check
        :return: True if an object is registered under the name
        """
        return name.lower() in (cls.registry or {})

    @classmethod
    def get_registered_object(cls, name: str) -> RegistryObjT | None:
        """
        :param name: Name the object was registered under
        :return: The registered object, or None if the name is unknown
        """
        return (cls.registry or {}).get(name.lower())
