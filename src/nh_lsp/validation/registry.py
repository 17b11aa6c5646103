"""Ordered validator registry and its runtime construction."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from nh_lsp.config import ServerConfig
from nh_lsp.logging import JsonlEventLogger
from nh_lsp.validation.base import Validator
from nh_lsp.validation.file_paths import FilePathValidator
from nh_lsp.validation.ship_log import ShipLogValidator


@dataclass(slots=True)
class ValidatorRegistry:
    """Validators in deterministic registration order."""

    _validators: list[Validator] = field(default_factory=list)

    def register(self, validator: Validator) -> None:
        """Register a validator, rejecting duplicate names."""
        if any(existing.name == validator.name for existing in self._validators):
            raise ValueError(f"Validator already registered: {validator.name}")
        self._validators.append(validator)

    def __iter__(self) -> Iterator[Validator]:
        return iter(self._validators)

    def __len__(self) -> int:
        return len(self._validators)

    def get(self, name: str) -> Validator | None:
        for validator in self._validators:
            if validator.name == name:
                return validator
        return None

    def names(self) -> tuple[str, ...]:
        """Return registered validator names in deterministic order."""
        return tuple(validator.name for validator in self._validators)


def build_validator_registry(
    config: ServerConfig, logger: JsonlEventLogger | None = None
) -> ValidatorRegistry:
    """Build and prepare the validator list from effective config."""
    registry = ValidatorRegistry()
    registry.register(
        ShipLogValidator(extra_curiosities=config.validation.extra_curiosities, logger=logger)
    )
    if config.validation.file_paths_enabled:
        registry.register(
            FilePathValidator(pointers=config.validation.file_path_pointers, logger=logger)
        )
    for validator in registry:
        validator.prepare()
    return registry
