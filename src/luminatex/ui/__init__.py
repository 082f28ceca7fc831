"""User interfaces built on top of the LuminaTeX API."""
