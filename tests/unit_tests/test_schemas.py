"""Unit tests for descriptor and registry schemas."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from format_converter.errors import ConversionError, InvalidSourceError, SchemaInvalidError
from format_converter.schemas import (
    ConverterDescriptor,
    Registry,
    RegistryEntry,
    normalize_format,
    validate_source_url,
)


def _convert(input_path: str, output_path: str, options: dict[str, object]) -> bool:
    del input_path, output_path, options
    return True


def _candidate(**overrides: object) -> dict[str, object]:
    candidate: dict[str, object] = {
        "name": "json2yaml",
        "description": "JSON to YAML",
        "source_formats": ["json"],
        "target_formats": ["yaml", "yml"],
        "convert": _convert,
    }
    candidate.update(overrides)
    return candidate


def test_normalize_format_strips_dot_and_case() -> None:
    """Normalize extensions into lower-case tags."""
    assert normalize_format(".JSON") == "json"
    assert normalize_format(" Yaml ") == "yaml"
    assert normalize_format("") == ""


def test_descriptor_accepts_mapping_candidate() -> None:
    """Validate a well-formed mapping candidate."""
    descriptor = ConverterDescriptor.from_candidate(_candidate(), "test")
    assert descriptor.name == "json2yaml"
    assert descriptor.source_formats == ("json",)
    assert descriptor.target_formats == ("yaml", "yml")
    assert descriptor.get_options is None


def test_descriptor_accepts_object_candidate() -> None:
    """Pick up attributes and bound methods from plain objects."""

    class Plugin:
        name = "csv2json"
        description = "CSV to JSON"
        source_formats = ("csv",)
        target_formats = {"json"}

        def convert(self, input_path: str, output_path: str, options: object) -> bool:
            del input_path, output_path, options
            return True

        def get_options(self) -> dict[str, object]:
            return {}

    descriptor = ConverterDescriptor.from_candidate(Plugin(), "test")
    assert descriptor.name == "csv2json"
    assert descriptor.target_formats == ("json",)
    assert descriptor.get_options is not None


def test_descriptor_normalizes_and_deduplicates_formats() -> None:
    """Lower-case tags, strip dots and keep first occurrence order."""
    descriptor = ConverterDescriptor.from_candidate(
        _candidate(source_formats=[".JSON", "json", "Jsonc"]), "test"
    )
    assert descriptor.source_formats == ("json", "jsonc")


@pytest.mark.parametrize(
    ("field", "value", "fragment"),
    [
        ("source_formats", [], "source_formats"),
        ("target_formats", [], "target_formats"),
        ("source_formats", "json", "not a string"),
        ("target_formats", ["  "], "cannot be empty"),
        ("name", "   ", "name"),
        ("convert", "not-callable", "convert"),
    ],
)
def test_descriptor_reports_violated_constraint(
    field: str, value: object, fragment: str
) -> None:
    """Carry the specific violated field on SchemaInvalidError."""
    with pytest.raises(SchemaInvalidError) as info:
        ConverterDescriptor.from_candidate(_candidate(**{field: value}), "repo")
    assert any(fragment in violation for violation in info.value.violations)


def test_descriptor_requires_convert_arity() -> None:
    """Reject convert callables that cannot take three arguments."""
    with pytest.raises(SchemaInvalidError, match="convert"):
        ConverterDescriptor.from_candidate(_candidate(convert=lambda path: True), "repo")


def test_descriptor_rejects_get_options_with_arguments() -> None:
    """Reject get_options callables that require arguments."""
    with pytest.raises(SchemaInvalidError, match="get_options"):
        ConverterDescriptor.from_candidate(
            _candidate(get_options=lambda required: {}), "repo"
        )


def test_descriptor_missing_fields_listed() -> None:
    """List every missing required field."""
    with pytest.raises(SchemaInvalidError) as info:
        ConverterDescriptor.from_candidate({"name": "x"}, "repo")
    joined = " ".join(info.value.violations)
    for field in ("description", "source_formats", "target_formats", "convert"):
        assert field in joined


def test_format_pairs_is_cross_product() -> None:
    """Expose every source x target pair in declaration order."""
    descriptor = ConverterDescriptor.from_candidate(
        _candidate(source_formats=["json", "jsonc"], target_formats=["yaml", "toml"]),
        "test",
    )
    assert descriptor.format_pairs() == [
        ("json", "yaml"),
        ("json", "toml"),
        ("jsonc", "yaml"),
        ("jsonc", "toml"),
    ]
    assert descriptor.supports("jsonc", "toml")
    assert not descriptor.supports("yaml", "json")


def test_options_are_validated() -> None:
    """Parse declared options and reject malformed declarations."""
    descriptor = ConverterDescriptor.from_candidate(
        _candidate(
            get_options=lambda: {
                "indent": {"description": "Indent width", "required": False, "default": 2}
            }
        ),
        "test",
    )
    options = descriptor.options()
    assert options["indent"].default == 2
    assert options["indent"].required is False

    broken = ConverterDescriptor.from_candidate(
        _candidate(get_options=lambda: {"indent": {"default": 2}}), "test"
    )
    with pytest.raises(SchemaInvalidError, match="get_options"):
        broken.options()

    not_mapping = ConverterDescriptor.from_candidate(
        _candidate(get_options=lambda: ["indent"]), "test"
    )
    with pytest.raises(SchemaInvalidError, match="must return a mapping"):
        not_mapping.options()


def test_run_requires_boolean_outcome() -> None:
    """Reject converters that do not report a boolean outcome."""
    descriptor = ConverterDescriptor.from_candidate(
        _candidate(convert=lambda i, o, opts: "done"), "test"
    )
    with pytest.raises(ConversionError, match="expected bool"):
        descriptor.run("a.json", "b.yaml", {})


def test_registry_entry_uses_persisted_aliases() -> None:
    """Read and write the github/installedAt keys."""
    entry = RegistryEntry.model_validate(
        {
            "name": "json2yaml",
            "github": "https://example.com/org/json2yaml",
            "installedAt": "2026-01-02T03:04:05Z",
            "stars": 10,
        }
    )
    assert entry.source == "https://example.com/org/json2yaml"
    assert entry.installed_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

    document = Registry(converters=(entry,)).to_document()
    assert document == {
        "converters": [
            {
                "name": "json2yaml",
                "github": "https://example.com/org/json2yaml",
                "installedAt": "2026-01-02T03:04:05Z",
            }
        ]
    }


def test_registry_entry_rejects_invalid_url() -> None:
    """Require the source to be a URL."""
    with pytest.raises(ValidationError):
        RegistryEntry(
            name="x", source="not a url", installed_at=datetime.now(UTC)
        )


def test_validate_source_url() -> None:
    """Raise InvalidSourceError for non-URLs."""
    assert validate_source_url("https://example.com/a/b") == "https://example.com/a/b"
    with pytest.raises(InvalidSourceError):
        validate_source_url("just-a-name")


def test_registry_is_immutable_and_ordered() -> None:
    """Return new registries from with_entry/without."""
    now = datetime.now(UTC)
    first = RegistryEntry(name="a", source="https://example.com/a", installed_at=now)
    second = RegistryEntry(name="b", source="https://example.com/b", installed_at=now)

    empty = Registry()
    registry = empty.with_entry(first).with_entry(second)
    assert empty.names() == []
    assert registry.names() == ["a", "b"]
    assert registry.find("b") == second
    assert registry.find("c") is None
    assert registry.without("a").names() == ["b"]


def test_options_wraps_raising_declaration() -> None:
    """Report a get_options() that raises as a schema violation."""

    def _options() -> dict[str, object]:
        raise RuntimeError("options unavailable")

    descriptor = ConverterDescriptor.from_candidate(_candidate(get_options=_options), "test")
    with pytest.raises(SchemaInvalidError, match="RuntimeError: options unavailable"):
        descriptor.options()
