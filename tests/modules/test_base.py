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

import inspect

from jenkins_pipelines.modules import base as modules_base
from jenkins_pipelines.modules import project_multibranch
from jenkins_pipelines.modules import project_pipeline
from tests import base


class TestBase(base.BaseTestCase):

    def test_root_xml_takes_project_name(self):
        self.assertRaises(NotImplementedError,
                          modules_base.Base().root_xml, None, 'demo')

    def test_modules_match_base_signature(self):
        expected = inspect.signature(modules_base.Base.root_xml)
        for module in (project_pipeline.Pipeline,
                       project_multibranch.WorkflowMultiBranch):
            self.assertEqual(expected, inspect.signature(module.root_xml))
