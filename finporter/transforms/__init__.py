"""
Transforms sub-package for finporter.

Field-level value parsers shared by every importer. Each parser takes
one cell's text and returns a typed value or ``None``:
  - numbers.py: money, percentages, booleans and padded strings.
  - dates.py: ISO dates, naked vendor dates and banner timestamps.

Why separate from the importers:
- The same quirks ("$1,234.56", "07/16/2021 as of 07/15/2021") recur
  across institutions, so one parser serves every vendor mapping.
- Parsers never raise, which keeps the "parse leniently, validate the
  row" rule in one place (importers/base.py).
"""
