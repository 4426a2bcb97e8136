"""SmartRef: scripture reference parsing, matching, validation and autocomplete."""

__version__ = "0.1.0"
