# Copyright 2025 Ralph Lemke
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

"""Base error type shared by every TradeFlow phase."""


class TradeFlowError(Exception):
    """Base class for lexing, parsing and runtime errors."""


class SourceError(TradeFlowError):
    """Error tied to a position in workflow source text."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        location = f" at line {line}" if line is not None else ""
        super().__init__(f"{message}{location}")
