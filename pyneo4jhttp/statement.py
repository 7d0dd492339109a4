"""Neo4j HTTP driver Cypher statement.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Optional, Tuple  # pylint: disable=unused-import

from .exception import ProgrammingError

__all__ = ['Statement', 'convert_placeholders']

PLACEHOLDER = '?'


def convert_placeholders(text):
    # type: (str) -> Tuple[str, int]
    """Rewrite qmark placeholders into numbered Cypher parameters.

    Each ? outside of string literals, backtick-quoted names and comments
    becomes $1, $2, ...

    :returns: A tuple of (rewritten text, number of placeholders).
    """
    out = []
    count = 0
    quote = None      # type: Optional[str]
    i = 0
    end = len(text)
    while i < end:
        c = text[i]
        if quote is not None:
            out.append(c)
            if c == '\\' and quote != '`' and i + 1 < end:
                out.append(text[i + 1])
                i += 1
            elif c == quote:
                quote = None
        elif c in ('"', "'", '`'):
            quote = c
            out.append(c)
        elif text.startswith('//', i):
            nl = text.find('\n', i)
            if nl < 0:
                nl = end
            out.append(text[i:nl])
            i = nl
            continue
        elif text.startswith('/*', i):
            close = text.find('*/', i + 2)
            close = end if close < 0 else close + 2
            out.append(text[i:close])
            i = close
            continue
        elif c == PLACEHOLDER:
            count += 1
            out.append('$%d' % count)
        else:
            out.append(c)
        i += 1
    return ''.join(out), count


class Statement(object):
    """A Cypher statement with its parameters.

    Statements are immutable: build a new one for each execution.
    """

    __slots__ = ('__text', '__parameters', '__include_stats')

    def __init__(self, text,            # type: str
                 parameters=None,       # type: Optional[Mapping[str, Any]]
                 include_stats=False    # type: bool
                 ):
        # type: (...) -> None
        """Create a statement.

        :param text: Cypher query text.
        :param parameters: Named parameters referenced as $name in the text.
        :param include_stats: Ask the server for update statistics.
        """
        if not isinstance(text, str):
            raise ProgrammingError("Statement text must be a string, got %s"
                                   % (type(text).__name__))
        self.__text = text
        self.__parameters = dict((str(k), v) for k, v in (parameters or {}).items())
        self.__include_stats = bool(include_stats)

    @classmethod
    def build(cls, operation,       # type: str
              parameters=None,      # type: Any
              include_stats=False   # type: bool
              ):
        # type: (...) -> Statement
        """Create a statement from DB-API style parameters.

        A mapping is passed through as named parameters.  Any other sequence
        is bound positionally to the ? placeholders of the operation.

        :raises ProgrammingError: If the positional parameter count does not
                                  match the placeholders.
        """
        if parameters is None:
            return cls(operation, None, include_stats)
        if isinstance(parameters, Mapping):
            return cls(operation, parameters, include_stats)
        if isinstance(parameters, (str, bytes)) or not isinstance(parameters, Sequence):
            raise ProgrammingError("Parameters must be a sequence or a mapping, got %s"
                                   % (type(parameters).__name__))

        text, count = convert_placeholders(operation)
        if count != len(parameters):
            raise ProgrammingError("Incorrect number of parameters specified,"
                                   " expected %d, got %d" % (count, len(parameters)))
        named = dict(('%d' % (i + 1), v) for i, v in enumerate(parameters))
        return cls(text, named, include_stats)

    @property
    def text(self):
        # type: () -> str
        return self.__text

    @property
    def parameters(self):
        # type: () -> Dict[str, Any]
        """Return a copy of the parameters."""
        return dict(self.__parameters)

    @property
    def include_stats(self):
        # type: () -> bool
        return self.__include_stats

    def __eq__(self, other):
        if not isinstance(other, Statement):
            return NotImplemented
        return (self.__text == other.text and
                self.__parameters == other.parameters and
                self.__include_stats == other.include_stats)

    def __hash__(self):
        return hash((self.__text, tuple(sorted(self.__parameters)), self.__include_stats))

    def __repr__(self):
        return 'Statement(%r, %r, include_stats=%r)' % (
            self.__text, self.__parameters, self.__include_stats)
