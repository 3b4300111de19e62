"""
Application Layer - Use cases

Contains:
- keywords: Keyword extraction, scoring and fan-out planning
- classification: Document classification and the organize workflow
- search: Provider orchestration and the reference-paper workflow
"""
