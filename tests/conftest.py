# Copyright (C) 2020 Jenkins Pipelines Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

"""Expand testscenarios scenarios at collection time for pytest.

pytest binds the test method to the collected instance before calling
``run()``, so the per-scenario clones made by ``WithScenarios.run`` end up
executing against the original instance without scenario attributes.
Generate one unittest class per scenario instead.
"""

import os

import testscenarios
from _pytest.unittest import UnitTestCase


def pytest_pycollect_makeitem(collector, name, obj):
    if not (isinstance(obj, type)
            and issubclass(obj, testscenarios.WithScenarios)
            and getattr(obj, 'scenarios', None)):
        return None

    items = []
    for scenario_name, params in obj.scenarios:
        label = os.path.basename(scenario_name)
        attrs = dict(params, scenarios=[])
        scenario_cls = type(obj.__name__, (obj,), attrs)
        scenario_cls.__qualname__ = obj.__qualname__
        scenario_cls.__module__ = obj.__module__
        item = UnitTestCase.from_parent(
            collector, name='{0}[{1}]'.format(name, label))
        item._obj = scenario_cls
        items.append(item)
    return items
