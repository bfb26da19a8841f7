"""Dependency injection container."""

from collections.abc import Callable, Collection

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from stagelink.util.di import PROVIDERS, Component, get_provider


def build_container(mocked: Callable[[Component], bool]) -> AsyncContainer:
    """Assemble a container from every registered provider.

    Args:
        mocked: Decides, per mockable component, whether its mock
                implementation is used. Concrete providers are always used
                as they are.
    """
    instances = []
    for base in PROVIDERS:
        component = mockable_component(base)
        use_mock = component is not None and mocked(component)
        instances.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*instances, FastapiProvider())


def mockable_component(base) -> Component | None:
    """Component name of a mockable provider base, None for concrete ones."""
    if not base.__subclasses__():
        return None
    return getattr(base, "__mock_component__", None)


def mockable_components() -> Collection[Component]:
    return {
        component
        for component in map(mockable_component, PROVIDERS)
        if component is not None
    }


def create_container() -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables automatically.
    """
    return build_container(lambda component: False)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app; routes resolve through it per request."""
    setup_dishka(container, app)
