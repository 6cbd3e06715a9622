"""
cvsheet - spreadsheet-driven CV rendering

Turns tabular CV data (entries, text blocks, contact info, lists, output, side)
into markdown fragments for inclusion in a larger document template.

Architecture:
- Intake Context: Reading tables from a data source into fixed-schema records
- Templating Context: Date resolution, entry normalization, section rendering
"""

__version__ = "0.1.0"
