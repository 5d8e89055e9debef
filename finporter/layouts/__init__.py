"""
Layout definitions sub-package for finporter.

Contains one YAML file per vendor importer (named after the importer
id) holding the regular expressions that locate its header, blocks,
embedded tables and title lines. The loader module (layout_registry.py
in the parent package) reads these files at runtime.
"""
