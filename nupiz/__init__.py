"""Tokenizer, bytecode chunks, serializer, runtime and native libraries for the Nupiz language."""

__version__ = "0.1.0"