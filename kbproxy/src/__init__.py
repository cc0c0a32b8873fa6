"""
Core package for the proxy.

This package contains the main application logic and components including:
- Data models for knowledge bases, uploads and retrieved chunks
- Services for the upstream knowledge-base client, LLM and chat pipeline
- API routes, endpoints and error middleware
"""
