"""Tokens, lexing, hover documentation and MIDI rendering for the relanote music language."""

__version__ = "0.1.0"
__all__ = ["tokens", "lexer", "midi", "docs", "server"]