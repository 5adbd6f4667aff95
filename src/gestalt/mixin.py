"""Mixin that gives a class its own configuration directory.

Usage:
    class App(Gestalt):
        pass

    App.configure_gestalt(config_path="~/app/config")

    app = App()
    app.load_environment("production")
    app.config.database.host

    # or keep the configuration on the class itself
    App.load_environment("production")
    App.config.database.host

Each subclass owns a copy of its parent's settings taken when the subclass
is created, so changing ``App.gestalt`` never leaks into other hosts.
"""

import dataclasses
import functools
import logging
import types
from typing import Any, Callable, Optional

from .loader import ConfigLoader
from .settings import GestaltSettings, resolve_environment
from .store import Store

logger = logging.getLogger(__name__)


class hostmethod:
    """Binds to the instance when accessed on one, otherwise to the class."""

    def __init__(self, func: Callable[..., Any]):
        self.func = func
        functools.update_wrapper(self, func)

    def __get__(self, obj: Any, owner: Optional[type] = None) -> Any:
        return types.MethodType(self.func, owner if obj is None else obj)


class _ConfigurationAlias:
    """``config``: the host's ``configuration``, on instances and classes."""

    def __get__(self, obj: Any, owner: Optional[type] = None) -> Optional[Store]:
        return (owner if obj is None else obj).configuration


class Gestalt:
    """Adds ``parse_configuration`` and ``configuration`` to a host class.

    ``parse_configuration`` and ``load_environment`` work on an instance
    (the configuration is attached to that instance) and on the class
    itself (attached to the class). Instances without a configuration of
    their own see the class's.
    """

    gestalt: GestaltSettings = GestaltSettings()
    configuration: Optional[Store] = None
    config = _ConfigurationAlias()

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.gestalt = dataclasses.replace(cls.gestalt)
        cls.configuration = None

    @classmethod
    def configure_gestalt(
        cls,
        callback: Optional[Callable[[GestaltSettings], Any]] = None,
        **changes: Any,
    ) -> Any:
        """Update this class's loader settings.

        Keyword arguments replace settings fields. When ``callback`` is
        given it is called with the settings and its result returned;
        otherwise the settings are returned.

        Raises:
            TypeError: If a keyword is not a settings field.
        """
        fields = {f.name for f in dataclasses.fields(GestaltSettings)}
        unknown = sorted(set(changes) - fields)
        if unknown:
            raise TypeError(f"Unknown gestalt setting(s): {', '.join(unknown)}")
        for name, value in changes.items():
            setattr(cls.gestalt, name, value)
        if callback is not None:
            return callback(cls.gestalt)
        return cls.gestalt

    @hostmethod
    def parse_configuration(
        host,
        key: Any = None,
        callback: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """Load the configuration directory and attach it as ``configuration``.

        Args:
            key: Root key to extract from every file (e.g. an environment).
            callback: Called without arguments after loading; its result is
                returned instead of the configuration.

        The previous configuration is kept if loading fails.
        """
        configuration = ConfigLoader(host.gestalt).load(key)
        host.configuration = configuration
        name = host.__name__ if isinstance(host, type) else type(host).__name__
        logger.debug(f"{name} configuration loaded ({len(configuration)} file(s))")
        if callback is not None:
            return callback()
        return configuration

    @hostmethod
    def load_environment(
        host,
        env: Optional[str] = None,
        callback: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """Load the branch for ``env`` (default: $GESTALT_ENV or "development")."""
        return host.parse_configuration(resolve_environment(env), callback)
