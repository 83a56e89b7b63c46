"""
Ingest modules.

- parse_stats: Parse FreeSurfer stats tables and headers
- discover: Locate stats files and subjects
- dataset: Build HemisphereDataset objects
"""
