"""codeAgent: a command-line coding assistant with bounded task delegation."""

__version__ = "0.1.0"
