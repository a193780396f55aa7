"""Protocol implemented by installable converters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

OptionSpec = Mapping[str, Any]


@runtime_checkable
class ConverterPlugin(Protocol):
    """Shape a converter's ``dist/converter.py`` must export.

    The module exposes either ``CONVERTER`` (an object or mapping with these
    members) or a ``create_converter()`` factory returning one. ``get_options``
    is optional.
    """

    name: str
    description: str
    source_formats: Sequence[str]
    target_formats: Sequence[str]

    def convert(
        self,
        input_path: str,
        output_path: str,
        options: Mapping[str, Any],
    ) -> bool:
        """Convert ``input_path`` into ``output_path``.

        Parameters
        ----------
        input_path : str
            Source file.
        output_path : str
            Destination file.
        options : Mapping[str, Any]
            Caller-supplied options, defaults already applied.

        Returns
        -------
        bool
            ``True`` when the conversion succeeded.
        """
