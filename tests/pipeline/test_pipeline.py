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


import copy
import os

from testtools import ExpectedException

from jenkins_pipelines import definitions as d
from jenkins_pipelines import errors
from jenkins_pipelines.modules import project_pipeline
from tests import base


class TestCasePipeline(base.BaseScenariosTestCase):
    fixtures_path = os.path.join(os.path.dirname(__file__), 'fixtures')
    scenarios = base.get_scenarios(fixtures_path)


class TestPipelineRoundTrip(base.BaseTestCase):

    def pipeline(self, **kwargs):
        return d.NoScmPipeline(name='test', description='for test',
                               jenkinsfile="node{echo 'hello'}", **kwargs)

    def assertRoundTrip(self, pipeline):
        config = project_pipeline.encode_pipeline(pipeline)
        decoded = project_pipeline.decode_pipeline(config, pipeline.name)
        self.assertEqual(pipeline, decoded)
        return config

    def test_minimal(self):
        self.assertRoundTrip(self.pipeline())

    def test_disable_concurrent(self):
        self.assertRoundTrip(self.pipeline(disable_concurrent=True))

    def test_discarder(self):
        for days, num in (('3', '5'), ('3', ''), ('', '21321'), ('', '')):
            self.assertRoundTrip(self.pipeline(
                discarder=d.DiscarderProperty(days_to_keep=days,
                                              num_to_keep=num)))

    def test_parameters(self):
        self.assertRoundTrip(self.pipeline(parameters=[
            d.Parameter(name='d', type='choice', default_value='a\nb',
                        description='fortest'),
            d.Parameter(name='a', type='string', default_value='abc',
                        description='fortest'),
            d.Parameter(name='b', type='boolean', default_value='false',
                        description='fortest'),
            d.Parameter(name='c', type='password',
                        default_value='password \n aaa',
                        description='fortest'),
            d.Parameter(name='e', type='text', default_value='a\nb',
                        description='fortest'),
            d.Parameter(name='f', type='file', description='fortest'),
        ]))

    def test_empty_parameters(self):
        config = project_pipeline.encode_pipeline(self.pipeline(parameters=[]))
        self.assertNotIn('ParametersDefinitionProperty', config)
        self.assertIsNone(
            project_pipeline.decode_pipeline(config, 'test').parameters)

    def test_password_default_value(self):
        pipeline = self.pipeline(parameters=[
            d.Parameter(name='secret', type='password', default_value='abc')])
        decoded = project_pipeline.decode_pipeline(
            project_pipeline.encode_pipeline(pipeline), pipeline.name)
        self.assertEqual('abc', decoded.parameters[0].default_value)

    def test_timer_trigger(self):
        self.assertRoundTrip(self.pipeline(
            timer_trigger=d.TimerTrigger(cron='1 1 1 * * *')))

    def test_remote_trigger(self):
        config = self.assertRoundTrip(self.pipeline(
            remote_trigger=d.RemoteTrigger(token='abc')))
        self.assertIn('<authToken>abc</authToken>', config)

    def test_empty_remote_trigger(self):
        self.assertRoundTrip(self.pipeline(
            remote_trigger=d.RemoteTrigger(token='')))

    def test_crlf_jenkinsfile(self):
        pipeline = d.NoScmPipeline(name='crlf',
                                   jenkinsfile="node {\r\n  echo 'a'\r\n}")
        config = self.assertRoundTrip(pipeline)
        self.assertNotIn('\r', config)
        self.assertIn('node {&#13;\n', config)

    def test_crlf_parameters(self):
        self.assertRoundTrip(self.pipeline(
            description='line\r\nbreak',
            parameters=[
                d.Parameter(name='t', type='text', default_value='a\r\nb'),
                d.Parameter(name='s', type='string', default_value='a\r',
                            description='\r\n'),
            ]))

    def test_invalid_characters(self):
        pipeline = d.NoScmPipeline(name='colors',
                                   jenkinsfile="echo '\x1b[31m'")
        exc = self.assertRaises(errors.InvalidAttributeError,
                                project_pipeline.encode_pipeline, pipeline)
        self.assertIn('invalid value for attribute colors.script', str(exc))

    def test_everything(self):
        self.assertRoundTrip(self.pipeline(
            disable_concurrent=True,
            discarder=d.DiscarderProperty('3', '5'),
            parameters=[d.Parameter(name='a', type='string',
                                    default_value='abc')],
            timer_trigger=d.TimerTrigger(cron='H 2 * * *'),
            remote_trigger=d.RemoteTrigger(token='abc')))

    def test_encode_does_not_mutate(self):
        pipeline = self.pipeline(parameters=[
            d.Parameter(name='a', type='choice', default_value='a\nb')])
        original = copy.deepcopy(pipeline)
        project_pipeline.encode_pipeline(pipeline)
        self.assertEqual(original, pipeline)

    def test_xml_version(self):
        config = project_pipeline.encode_pipeline(self.pipeline())
        self.assertTrue(config.startswith('<?xml version="1.1"'))

    def test_wrong_root(self):
        with ExpectedException(errors.PipelineParseError,
                               "can not find pipeline definition"):
            project_pipeline.decode_pipeline(
                '<?xml version="1.1" encoding="UTF-8"?>\n<project/>')

    def test_malformed(self):
        self.assertRaises(errors.PipelineParseError,
                          project_pipeline.decode_pipeline,
                          '<flow-definition><description>')

    def test_missing_sections(self):
        decoded = project_pipeline.decode_pipeline(
            '<flow-definition plugin="workflow-job"/>', 'bare')
        self.assertEqual(d.NoScmPipeline(name='bare'), decoded)
