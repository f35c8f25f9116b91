"""Pipeline module for the book RAG evaluation system.

This package provides the clients the evaluation talks to: chat-completion
models, the RAG system under test, and the source chunk loader.
"""
