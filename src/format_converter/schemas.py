"""Pydantic schemas for converter descriptors and the persisted registry."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from itertools import product
from typing import Any

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from format_converter.errors import (
    ConversionError,
    InvalidSourceError,
    SchemaInvalidError,
)
from format_converter.types import FormatPair, OptionMap

_URL_ADAPTER = TypeAdapter(AnyUrl)


def normalize_format(value: str) -> str:
    """Normalize a format tag or file extension (``".JSON"`` -> ``"json"``)."""
    return value.strip().lower().removeprefix(".")


def validate_source_url(value: str) -> str:
    """Return ``value`` unchanged if it is a valid URL.

    Raises
    ------
    InvalidSourceError
        If ``value`` is not a URL.
    """
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise InvalidSourceError(f"'{value}' is not a valid source URL.") from exc
    return value


def _accepts_positional(fn: Callable[..., Any], count: int) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins and some C callables expose no signature.
        return True
    try:
        signature.bind(*([None] * count))
    except TypeError:
        return False
    return True


def describe_validation_error(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into ``"<field>: <reason>"`` strings."""
    violations: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "converter"
        violations.append(f"{location}: {error['msg']}")
    return violations


class ConverterOption(BaseModel):
    """One option a converter declares through ``get_options()``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    description: str
    required: bool
    default: Any = None


class ConverterDescriptor(BaseModel):
    """Validated in-memory shape of a loaded converter.

    Candidates may be mappings or arbitrary objects exposing the same
    attributes; methods on an object are picked up as bound callables.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        from_attributes=True,
        arbitrary_types_allowed=True,
    )

    name: str
    description: str
    source_formats: tuple[str, ...]
    target_formats: tuple[str, ...]
    convert: Callable[..., Any]
    get_options: Callable[[], Any] | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be empty")
        return value

    @field_validator("source_formats", "target_formats", mode="before")
    @classmethod
    def _reject_bare_string(cls, value: object) -> object:
        if isinstance(value, str):
            raise ValueError("must be a list of format tags, not a string")
        if isinstance(value, Iterable) and not isinstance(value, (list, tuple)):
            return tuple(value)
        return value

    @field_validator("source_formats", "target_formats")
    @classmethod
    def _normalize_formats(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalized: list[str] = []
        for item in value:
            tag = normalize_format(item)
            if not tag:
                raise ValueError("format tags cannot be empty")
            if tag not in normalized:
                normalized.append(tag)
        if not normalized:
            raise ValueError("must contain at least one format")
        return tuple(normalized)

    @field_validator("convert")
    @classmethod
    def _validate_convert(cls, value: Callable[..., Any]) -> Callable[..., Any]:
        if not _accepts_positional(value, 3):
            raise ValueError("must accept (input_path, output_path, options)")
        return value

    @field_validator("get_options")
    @classmethod
    def _validate_get_options(
        cls, value: Callable[[], Any] | None
    ) -> Callable[[], Any] | None:
        if value is not None and not _accepts_positional(value, 0):
            raise ValueError("must be callable without arguments")
        return value

    @classmethod
    def from_candidate(cls, candidate: object, source: str) -> ConverterDescriptor:
        """Validate a loaded candidate, raising ``SchemaInvalidError`` on failure.

        Parameters
        ----------
        candidate : object
            Mapping or object exported by a converter artifact.
        source : str
            Where the candidate came from, used in error messages.

        Returns
        -------
        ConverterDescriptor
            Validated descriptor.
        """
        try:
            return cls.model_validate(candidate)
        except ValidationError as exc:
            raise SchemaInvalidError(source, describe_validation_error(exc)) from exc

    def supports(self, source_format: str, target_format: str) -> bool:
        """Check whether this converter declares the given pair."""
        return (
            source_format in self.source_formats
            and target_format in self.target_formats
        )

    def format_pairs(self) -> list[FormatPair]:
        """Return the full ``source x target`` cross product."""
        return list(product(self.source_formats, self.target_formats))

    def options(self) -> dict[str, ConverterOption]:
        """Return the options declared by ``get_options()``, if any.

        Raises
        ------
        SchemaInvalidError
            If ``get_options()`` raises or returns a malformed declaration.
        """
        if self.get_options is None:
            return {}
        try:
            declared = self.get_options()
        except Exception as exc:
            raise SchemaInvalidError(
                self.name, [f"get_options: raised {type(exc).__name__}: {exc}"]
            ) from exc
        if not isinstance(declared, Mapping):
            raise SchemaInvalidError(self.name, ["get_options: must return a mapping"])
        try:
            return {
                str(key): ConverterOption.model_validate(spec)
                for key, spec in declared.items()
            }
        except ValidationError as exc:
            raise SchemaInvalidError(
                self.name,
                [f"get_options.{item}" for item in describe_validation_error(exc)],
            ) from exc

    def run(self, input_path: str, output_path: str, options: OptionMap) -> bool:
        """Invoke ``convert`` and check it reports a boolean outcome.

        Raises
        ------
        ConversionError
            If the converter returns anything other than a ``bool``.
        """
        outcome = self.convert(input_path, output_path, dict(options))
        if not isinstance(outcome, bool):
            raise ConversionError(
                f"Converter '{self.name}' returned {type(outcome).__name__}, "
                "expected bool."
            )
        return outcome


class RegistryEntry(BaseModel):
    """Persisted metadata for one installed converter."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    source: str = Field(alias="github")
    installed_at: datetime = Field(alias="installedAt")

    @field_validator("source")
    @classmethod
    def _validate_source(cls, value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise ValueError("must be a valid URL") from exc
        return value


class Registry(BaseModel):
    """Persisted document listing installed converters in install order."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    converters: tuple[RegistryEntry, ...] = ()

    def names(self) -> list[str]:
        """Return entry names in registry order."""
        return [entry.name for entry in self.converters]

    def find(self, name: str) -> RegistryEntry | None:
        """Return the entry called ``name``, if any."""
        for entry in self.converters:
            if entry.name == name:
                return entry
        return None

    def with_entry(self, entry: RegistryEntry) -> Registry:
        """Return a copy with ``entry`` appended."""
        return Registry(converters=(*self.converters, entry))

    def without(self, name: str) -> Registry:
        """Return a copy with every entry called ``name`` removed."""
        return Registry(
            converters=tuple(entry for entry in self.converters if entry.name != name)
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
