"""Evaluation module for the book RAG system.

This package contains benchmark generation, critique, judging and reporting
utilities for assessing the answer quality of a book RAG
(Retrieval-Augmented Generation) system.
"""
