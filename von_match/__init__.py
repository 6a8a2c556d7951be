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



from .creds.index import CredentialIndex
from .engine import Engine
from .match.attribute import AttributeMatcher
from .match.descriptor import DescriptorMatcher
from .match.result import MatchResult
from .present.builder import DifSpec, IndySpec, build_presentation
from .request.detect import detect_format, parse_request
from .request.model import ProofFormat
from .request.normalize import locate_request
