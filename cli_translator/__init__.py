"""
CLI tool for translating natural language into shell commands.

This package turns a plain-language request into a single shell command using an
OpenAI-compatible chat completion API, asks the user before running it, and offers
one model-suggested repair when the command fails.
"""

__version__ = "0.3.0"
