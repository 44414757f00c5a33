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


import io
import os

import fixtures

from jenkins_pipelines import errors

from tests.base import mock
from tests.cmd.test_cmd import CmdTestsBase

pipeline_fixtures = os.path.join(os.path.dirname(__file__), '..', '..',
                                 'pipeline', 'fixtures')
multibranch_fixtures = os.path.join(os.path.dirname(__file__), '..', '..',
                                    'multibranch', 'fixtures')


class EncodeTests(CmdTestsBase):

    def _expected(self, path):
        with io.open(path, 'r', encoding='utf-8') as f:
            return f.read()

    @mock.patch('sys.stdout', new_callable=io.StringIO)
    def test_encode_to_stdout(self, stdout):
        args = ['--conf', self.default_config_file, 'encode',
                os.path.join(pipeline_fixtures, 'minimal.yaml')]
        self.execute_jenkins_pipelines_with_args(args)

        self.assertEqual(
            self._expected(os.path.join(pipeline_fixtures, 'minimal.xml')),
            stdout.getvalue())

    def test_encode_to_directory(self):
        output = self.useFixture(fixtures.TempDir()).path
        args = ['--conf', self.default_config_file, 'encode',
                os.path.join(pipeline_fixtures, 'minimal.yaml'), '-o', output]
        self.execute_jenkins_pipelines_with_args(args)

        self.assertEqual(['minimal.xml'], os.listdir(output))
        self.assertEqual(
            self._expected(os.path.join(pipeline_fixtures, 'minimal.xml')),
            self._expected(os.path.join(output, 'minimal.xml')))

    def test_encode_config_xml(self):
        output = self.useFixture(fixtures.TempDir()).path
        args = ['--conf', self.default_config_file, 'encode', '--config-xml',
                os.pathsep.join([
                    os.path.join(pipeline_fixtures, 'minimal.yaml'),
                    os.path.join(multibranch_fixtures, 'git.yaml'),
                ]), '-o', output]
        self.execute_jenkins_pipelines_with_args(args)

        self.assertEqual(['devops-git', 'minimal'],
                         sorted(os.listdir(output)))
        self.assertEqual(
            self._expected(os.path.join(multibranch_fixtures, 'git.xml')),
            self._expected(os.path.join(output, 'devops-git', 'config.xml')))

    def test_encode_directory(self):
        output = self.useFixture(fixtures.TempDir()).path
        args = ['--conf', self.default_config_file, 'encode',
                multibranch_fixtures, '-o', output]
        self.execute_jenkins_pipelines_with_args(args)

        self.assertEqual(
            ['devops-git.xml', 'devops-github.xml', 'devops-svn.xml'],
            sorted(os.listdir(output)))

    @mock.patch('sys.stdout', new_callable=io.StringIO)
    def test_skip_unknown_parameters(self, stdout):
        args = ['--conf', self.default_config_file, 'encode',
                '--allow-unknown-parameters',
                os.path.join(self.fixtures_path, 'hello.yaml')]
        self.execute_jenkins_pipelines_with_args(args)

        self.assertNotIn('ParameterDefinition', stdout.getvalue())
        self.assertIn("Skipping parameter 'run'", self.logger.output)

    def test_unknown_parameters(self):
        args = ['--conf', self.default_config_file, 'encode',
                os.path.join(self.fixtures_path, 'hello.yaml')]
        with mock.patch('sys.stdout', new_callable=io.StringIO):
            self.assertRaises(errors.InvalidAttributeError,
                              self.execute_jenkins_pipelines_with_args, args)
