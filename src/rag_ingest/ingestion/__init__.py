"""
Ingestion — validation, text extraction, chunking, and embedding.

This module converts an uploaded file (TXT, Markdown, optionally PDF)
into embedded chunks ready to be upserted into the vector store.
"""
