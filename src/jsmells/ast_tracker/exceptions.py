"""Exceptions raised while building syntax trees."""


class ParseFailure(Exception):
    """Source could not be turned into a syntax tree."""


class UnsupportedLanguageError(ValueError):
    """No grammar is available for the requested language or extension."""
