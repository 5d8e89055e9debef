"""
Importers sub-package for finporter.

Contains format-specific importers that turn an exported document into
rows of one canonical schema (plus the rows they had to reject).

Design: Strategy Pattern
- base.py defines the BaseImporter ABC (detect / decode / export) and
  BlockImporter, the shared vendor algorithm driven by a YAML layout.
- tabular.py implements TabularImporter for documents already in
  canonical column names.
- alloc_smart.py, chuck_*.py and fido_*.py implement one institution
  export each; they only supply field mappings.

The Prospector (detect.py) owns the ordered registry of importer
instances and chooses one at runtime.
"""
