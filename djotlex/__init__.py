"""Tokenizer for the Djot markup language: flat, paired block and inline tokens."""

__version__ = "0.1.0"