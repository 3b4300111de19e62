"""
MCP Server Instructions - guide for AI agents using this server.

Kept apart from server.py for easier maintenance.
"""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
Research Organizer MCP Server - project notes to organized documents and reference papers

═══════════════════════════════════════════════════════════════════════════════
📁 Project layout (paths are relative to the workspace directory)
═══════════════════════════════════════════════════════════════════════════════

<project>/
    Document/                         project notes (main.md, topic notes, ...)
    Academia/
        Paper Topic Suggestion/
            Suggestion.md             optional research-direction notes
        Reference Paper/              workbook output

═══════════════════════════════════════════════════════════════════════════════
🎯 Workflows
═══════════════════════════════════════════════════════════════════════════════

## 1️⃣ Organize project notes
organize_documents(project="my-project")
  → writes Main_/Topic_/ForTech_/ForAca_<date>.md next to the notes
  → writes Organization_Report_<date>.md
  Restrict output with categories=["Main", "ForTech"].

## 2️⃣ Find reference papers
search_reference_papers(project="my-project", source="ieee")
  → extracts keywords from the main and suggestion documents
  → searches IEEE Xplore / Semantic Scholar / web, falling back to a
    curated offline set when a backend is unavailable
  → writes Academia/Reference Paper/Reference_Papers_<date>.xlsx
  Sources: "ieee" (default), "semantic_scholar", "web".
  Call list_search_sources() to see which backends are configured.

## 3️⃣ Inspect without writing files
extract_keywords(text)        ranked keywords for a piece of text
classify_document(file_name, content)
                              category assignments with reasons
plan_keyword_sets(keywords)   the query fan-out a search would issue

═══════════════════════════════════════════════════════════════════════════════
⚠️ Notes
═══════════════════════════════════════════════════════════════════════════════
- Only one organize run and one search run may be active at a time; a
  concurrent call returns error_kind "concurrent_run_rejected".
- Responses are JSON. Failures carry "success": false, "error" and a
  "suggestion" when one is available.
"""
