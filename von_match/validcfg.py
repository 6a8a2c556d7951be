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


import jsonschema

from von_match.error import JSONValidation


CONFIG_JSON_SCHEMA = {
    'engine': {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'matching': {
                'type': 'string',
                'enum': ['greedy', 'bipartite']
            },
            'strict-restrictions': {
                'type': 'boolean'
            },
            'check-predicates': {
                'type': 'boolean'
            },
            'vc-wildcard': {
                'type': 'string',
                'minLength': 1
            }
        },
        'additionalProperties': False
    },
    'override': {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'additionalProperties': {
            'type': 'string',
            'minLength': 1
        }
    }
}

ENGINE_CFG_DEFAULTS = {
    'matching': 'greedy',
    'strict-restrictions': False,
    'check-predicates': False,
    'vc-wildcard': 'verifiablecredential'
}


def validate_config(key: str, config: dict) -> None:
    """
    Call jsonschema validation to raise JSONValidation on non-compliance or silently pass.

    :param key: validation schema key of interest
    :param config: configuration dict to validate
    """

    try:
        jsonschema.validate(config, CONFIG_JSON_SCHEMA[key])
    except jsonschema.ValidationError as x_valid:
        raise JSONValidation('JSON validation error on {} configuration: {}'.format(key, x_valid.message))
    except jsonschema.SchemaError as x_schema:
        raise JSONValidation('JSON schema error on {} specification: {}'.format(key, x_schema.message))


def engine_config(config: dict = None) -> dict:
    """
    Validate engine configuration and return it completed with defaults for absent entries.

    :param config: engine configuration dict, None for all defaults
    :return: complete engine configuration
    """

    validate_config('engine', config or {})
    return {**ENGINE_CFG_DEFAULTS, **(config or {})}
