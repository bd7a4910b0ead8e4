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

"""Root pytest configuration for TradeFlow tests."""

import os

import pytest

SAMPLE_SOURCE = """
let greeting = "Hello"
const user = 'trader'

workflow "Market Check" {
    step 1: fetch("https://api.example.com/prices")
    step 2: if (step 1.status == 200) {
        step 3: print(greeting + ", " + user)
    } else {
        step 4: notify("fetch failed: " + step 1.message)
    }
    step 5: send_email("desk@example.com", "Prices ready")
}
"""


@pytest.fixture(autouse=True)
def _isolate_tradeflow_env(monkeypatch, tmp_path):
    """Keep host TRADEFLOW_* variables and config files out of tests."""
    for name in list(os.environ):
        if name.startswith("TRADEFLOW_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("TRADEFLOW_CONFIG", str(tmp_path / "no-such-config.json"))


@pytest.fixture
def sample_source() -> str:
    """A small program touching variables, branches and step references."""
    return SAMPLE_SOURCE
