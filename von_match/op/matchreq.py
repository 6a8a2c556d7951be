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
import logging
import sys

from sys import exit as sys_exit
from typing import Sequence

from von_match.creds.index import CredentialIndex
from von_match.engine import Engine
from von_match.error import UnsatisfiableRequestError, VonMatchError
from von_match.frill import ini2engine_cfg, inis2dict, ppjson
from von_match.present.builder import build_presentation


def usage() -> None:
    """
    Print usage advice.
    """

    print()
    print('Usage: matchreq.py <config-ini>')
    print()
    print('where <config-ini> represents the path to the configuration file.')
    print()
    print('The operation matches a proof exchange record against stored-credential')
    print('listings and prints the match result and, on a full match, the presentation')
    print('specification to submit.')
    print()
    print('The configuration file has sections and entries as follows:')
    print('  * section [Engine]:')
    print('    - matching: (default greedy) greedy or bipartite')
    print('    - strict-restrictions: (default false) whether restricted indy items')
    print('        forgo attribute-coverage fallback')
    print('    - check-predicates: (default false) whether to exclude credentials')
    print('        whose values fail indy predicates')
    print('    - vc-wildcard: (default verifiablecredential) schema URI substring')
    print('        matching any W3C credential')
    print('  * section [Input]:')
    print('    - record.path: the path to the proof exchange record JSON file')
    print('    - creds.path: comma-separated paths to stored-credential listing JSON files')
    print()


def _load_json(path: str):
    with open(path, 'r') as fh_json:
        return json.load(fh_json)


def matchreq(ini_path: str) -> int:
    """
    Set configuration, load proof exchange record and credential listings, match and print.

    :param ini_path: path to configuration file
    :return: 0 for full match, 1 otherwise
    """

    config = inis2dict(ini_path)
    engine = Engine(ini2engine_cfg(config.get('Engine', {})))

    record = _load_json(config['Input']['record.path'])
    listings = [
        _load_json(path.strip())
        for path in config['Input'].get('creds.path', '').split(',')
        if path.strip()
    ]

    index = CredentialIndex(*listings)
    (proof_req, result) = engine.match(record, index)
    print(ppjson(result.to_dict()))
    if not result.can_fulfill:
        raise UnsatisfiableRequestError(result.unsatisfied)

    print(ppjson(build_presentation(proof_req, result, index).submission()))
    return 0


def main(args: Sequence[str] = None) -> int:
    """
    Main line for script: check arguments and dispatch operation to match proof request.

    :param args: command-line arguments
    :return: 0 for OK, 1 for failure
    """

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)-15s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S')
    logging.getLogger('von_match').setLevel(logging.WARNING)

    if args is None:
        args = sys.argv[1:]

    if len(args) == 1:
        try:
            return matchreq(args[0])
        except (VonMatchError, ValueError, KeyError, OSError) as x_op:
            print(str(x_op))
            return 1
    else:
        usage()
        return 1


if __name__ == '__main__':
    sys_exit(main())
