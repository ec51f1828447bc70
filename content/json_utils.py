# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

import re
from dataclasses import asdict
from enum import Enum
from typing import Any, Type, TypeVar

from dacite import Config, from_dict

T = TypeVar("T")

# Keys whose stored spelling does not follow plain camelCase.
_CAMEL_OVERRIDES = {
    "host_iit": "hostIIT",
    "inter_iit_edition": "interIITEdition",
}
_SNAKE_OVERRIDES = {value: key for key, value in _CAMEL_OVERRIDES.items()}

_DACITE_CONFIG = Config(cast=[Enum])


def snake_to_camel(key: str) -> str:
    if key in _CAMEL_OVERRIDES:
        return _CAMEL_OVERRIDES[key]
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(key: str) -> str:
    if key in _SNAKE_OVERRIDES:
        return _SNAKE_OVERRIDES[key]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def convert_keys(obj: Any, convert_fn) -> Any:
    """Recursively applies convert_fn to every dict key in obj."""
    if isinstance(obj, dict):
        return {convert_fn(k): convert_keys(v, convert_fn) for k, v in obj.items()}
    if isinstance(obj, list):
        return [convert_keys(item, convert_fn) for item in obj]
    return obj


def _plain_values(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _plain_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_plain_values(item) for item in obj]
    return obj


def to_record(entity: Any) -> dict:
    """Dataclass -> camelCase JSON-ready dict."""
    return convert_keys(_plain_values(asdict(entity)), snake_to_camel)


def from_record(data_class: Type[T], record: dict) -> T:
    """camelCase dict -> dataclass. Unknown keys are ignored."""
    return from_dict(
        data_class=data_class,
        data=convert_keys(record, camel_to_snake),
        config=_DACITE_CONFIG,
    )
