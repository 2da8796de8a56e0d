"""JSON schemas for report inputs.

- module_meta.schema.json: module ``meta.yml`` files carrying tool citations
- report_config.schema.json: the YAML configuration read by the CLI
"""
