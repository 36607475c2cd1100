"""
Crumbler Text Pre-processing Pipeline

A project-based pipeline for documents, directories and web pages with:
- Input validation and text extraction (markup, PDF, URLs)
- Cleaning and normalization (contraction tables, lowercasing)
- Tokenization, stopword removal, lemmatization, POS tagging and NER
- Export to text, CSV and XML
"""

__version__ = "1.0.0"
__author__ = "Crumbler Team"
