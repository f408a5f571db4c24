"""Sketchlang linker: resolves `#include` names to library providers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from .config import InterpreterConfig
from .libraries import LIBRARIES, LibraryProvider
from .libraries.base import Sleep
from .tokens import Keywords

if TYPE_CHECKING:
    from .evaluator import Evaluator

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., LibraryProvider]


class Linker:
    """Links libraries into one session's keyword table and evaluator."""

    def __init__(
        self,
        keywords: Keywords,
        evaluator: Evaluator,
        config: InterpreterConfig | None = None,
        sleep: Sleep | None = None,
        libraries: dict[str, ProviderFactory] | None = None,
    ):
        self.keywords = keywords
        self.evaluator = evaluator
        self.config = config if config is not None else evaluator.config
        self.sleep = sleep
        self.libraries: dict[str, ProviderFactory] = dict(
            LIBRARIES if libraries is None else libraries
        )
        self.linked: dict[str, LibraryProvider] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Make another library name available to `#include`."""
        self.libraries[name] = factory

    def link_library(self, name: str) -> bool:
        if name in self.linked:
            return True
        factory = self.libraries.get(name)
        if factory is None:
            logger.warning("no provider for library %s", name)
            return False
        provider = factory(config=self.config, sleep=self.sleep)
        provider.initialize()
        self.evaluator.add_library(provider)
        for class_name in provider.header:
            self.keywords.add_class(class_name)
        self.linked[name] = provider
        logger.info(
            "linked %s (%d fields, %d classes)",
            name,
            len(provider.fields),
            len(provider.header),
        )
        return True
