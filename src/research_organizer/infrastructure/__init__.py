"""
Infrastructure Layer - External services

Contains:
- sources: Literature search providers and relevance scorers
- storage: Local filesystem document store
- export: Workbook export
"""
