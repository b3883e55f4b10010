"""
Serving — FastAPI application for document ingestion.

Run with ``uvicorn rag_ingest.serving.app:app``.
"""
