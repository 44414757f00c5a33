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


import os

from jenkins_pipelines.cli import entry
from tests import base
from tests.base import mock


class CmdTestsBase(base.BaseTestCase):

    fixtures_path = os.path.join(os.path.dirname(__file__), 'fixtures')

    def setUp(self):
        super(CmdTestsBase, self).setUp()
        self.default_config_file = os.path.join(self.fixtures_path,
                                                'empty.ini')

    def execute_jenkins_pipelines_with_args(self, args):
        jenkins_pipelines = entry.JenkinsPipelines(args)
        jenkins_pipelines.execute()


class TestCmd(CmdTestsBase):

    def test_with_empty_args(self):
        """
        User passes no args, should fail with SystemExit
        """
        with mock.patch('sys.stderr'):
            self.assertRaises(SystemExit, entry.JenkinsPipelines, [])

    def test_without_command(self):
        with mock.patch('sys.stderr'):
            self.assertRaises(SystemExit, entry.JenkinsPipelines,
                              ['--conf', self.default_config_file])

    def test_unknown_command(self):
        with mock.patch('sys.stderr'):
            self.assertRaises(SystemExit, entry.JenkinsPipelines,
                              ['--conf', self.default_config_file, 'update'])

    def test_path_list(self):
        args = ['--conf', self.default_config_file, 'encode',
                os.pathsep.join(['a.yaml', 'b.yaml'])]
        jenkins_pipelines = entry.JenkinsPipelines(args)
        self.assertEqual(['a.yaml', 'b.yaml'],
                         jenkins_pipelines.options.path)

    def test_log_level(self):
        args = ['--conf', self.default_config_file, '-l', 'debug', 'encode',
                'a.yaml']
        jenkins_pipelines = entry.JenkinsPipelines(args)
        self.assertEqual(10, jenkins_pipelines.options.log_level)
