"""
Copyright 2017-2019 Government of Canada - Public Services and Procurement Canada - buyandsell.gc.ca

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""


from typing import Any, Iterable, Tuple

from jsonpath_ng import parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.jsonpath import Child, Descendants, Fields, JSONPath

from von_match.error import UnsupportedFormatError


FieldPath = Tuple[str, ...]


def raw(orig: Any) -> str:
    """
    Stringify input value, empty string for None.

    :param orig: original attribute value of any stringifiable type
    :return: stringified raw value
    """

    return '' if orig is None else str(orig)


def canon(raw_attr_name: str) -> str:
    """
    Canonicalize input attribute name as it appears in proof requests and credentials: strip out
    white space and convert to lower case.

    :param raw_attr_name: attribute name
    :return: canonicalized attribute name
    """

    if raw_attr_name:  # do not dereference None, and '' is already canonical
        return raw_attr_name.replace(' ', '').lower()
    return raw_attr_name


def canon_set(tokens: Iterable[str]) -> frozenset:
    """
    Lower-case each string in input iterable, discarding empties and non-strings.

    :param tokens: strings to canonicalize; e.g., credential types or subject field names
    :return: frozenset of lower-cased strings
    """

    return frozenset(t.lower() for t in tokens or () if isinstance(t, str) and t)


def _steps(expr: JSONPath) -> list:
    """
    Flatten parsed JSONPath expression into its sequence of steps.
    """

    if isinstance(expr, (Child, Descendants)):
        return _steps(expr.left) + _steps(expr.right)
    return [expr]


def _field_name(step: JSONPath) -> str:
    """
    Return the field name that a JSONPath step selects, None for a step selecting no single named field
    (root, index, slice, wildcard, filter, or several fields at once).
    """

    if isinstance(step, Fields) and len(step.fields) == 1 and step.fields[0] != '*':
        return step.fields[0]
    return None


def field_path(path: str) -> FieldPath:
    """
    Parse a JSONPath string into the names of the fields it steps through, dropping the root marker,
    array indices and wildcards; e.g., '$.credentialSubject.givenName', "$['credentialSubject']['givenName']"
    and '$.credentialSubject[0].givenName' all produce ('credentialSubject', 'givenName').

    Raise UnsupportedFormatError for a path that does not parse, or whose last step names no field
    (e.g., '$.credentialSubject[*]').

    :param path: JSONPath string
    :return: tuple of field names
    """

    if not isinstance(path, str):
        raise UnsupportedFormatError('Bad JSONPath {}: not a string'.format(path))

    try:
        steps = _steps(parse(path))
    except (JsonPathLexerError, JsonPathParserError, TypeError, ValueError) as x_parse:
        raise UnsupportedFormatError('Bad JSONPath {}: {}'.format(path, x_parse))

    if _field_name(steps[-1]) is None:
        raise UnsupportedFormatError('JSONPath {} names no field'.format(path))

    return tuple(name for name in (_field_name(s) for s in steps) if name is not None)
