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


import json
import re

from configparser import ConfigParser
from enum import IntEnum
from os.path import expandvars, isfile
from pprint import pformat
from typing import Any, Mapping, Sequence, Union


INI_BOOLS = {
    'true': True,
    'yes': True,
    'on': True,
    '1': True,
    'false': False,
    'no': False,
    'off': False,
    '0': False,
    '': False
}


def ppjson(dumpit: Any, elide_to: int = None) -> str:
    """
    JSON pretty printer, whether already json-encoded or not

    :param dumpit: object to pretty-print
    :param elide_to: optional maximum length including ellipses ('...')
    :return: json pretty-print
    """

    if elide_to is not None:
        elide_to = max(elide_to, 3) # make room for ellipses '...'
    try:
        rv = json.dumps(json.loads(dumpit) if isinstance(dumpit, str) else dumpit, indent=4, sort_keys=True)
    except (TypeError, ValueError):
        rv = '{}'.format(pformat(dumpit, indent=4, width=120))
    return rv if elide_to is None or len(rv) <= elide_to else '{}...'.format(rv[0 : elide_to - 3])


def inis2dict(ini_paths: Union[str, Sequence[str]]) -> dict:
    """
    Take one or more ini files and return a dict with configuration from all,
    interpolating bash-style variables ${VAR} or ${VAR:-DEFAULT}.

    :param ini_paths: path or paths to .ini files
    """

    var_dflt = r'\${(.*?):-(.*?)}'
    def _interpolate(content):
        rv = expandvars(content)
        while True:
            match = re.search(var_dflt, rv)
            if match is None:
                break
            bash_var = '${{{}}}'.format(match.group(1))
            value = expandvars(bash_var)
            rv = re.sub(var_dflt, match.group(2) if value == bash_var else value, rv, count=1)

        return rv

    parser = ConfigParser()

    for ini in [ini_paths] if isinstance(ini_paths, str) else ini_paths:
        if not isfile(ini):
            raise FileNotFoundError('No such file: {}'.format(ini))
        with open(ini, 'r') as ini_fh:
            ini_text = _interpolate(ini_fh.read())
            parser.read_string(ini_text)

    return {s: dict(parser[s].items()) for s in parser.sections()}


def ini2engine_cfg(section: Mapping[str, str]) -> dict:
    """
    Convert the strings of an engine configuration ini section to typed engine configuration,
    omitting blank entries so that engine defaults apply.

    Raise ValueError for a boolean entry that does not parse.

    :param section: ini section as inis2dict() returns it; e.g.,

    ::

        {
            'matching': 'bipartite',
            'strict-restrictions': 'yes',
            'check-predicates': '',
            'vc-wildcard': 'verifiablecredential'
        }

    :return: engine configuration dict for validation against CONFIG_JSON_SCHEMA['engine']
    """

    rv = {}
    for (key, value) in section.items():
        value = value.strip()
        if key in ('strict-restrictions', 'check-predicates'):
            if value.lower() not in INI_BOOLS:
                raise ValueError('Configured {} value {} is not boolean'.format(key, value))
            if value:
                rv[key] = INI_BOOLS[value.lower()]
        elif value:
            rv[key] = value

    return rv


class Ink(IntEnum):
    """
    Class encapsulating ink colours for logging.
    """

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37

    def __call__(self, message: str) -> str:
        """
        Return input message in colour.

        :return: input message in colour
        """

        return '\033[{}m{}\033[0m'.format(self.value, message)
