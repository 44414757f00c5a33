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

from testtools import ExpectedException

from jenkins_pipelines import definitions as d
from jenkins_pipelines import errors
from jenkins_pipelines import xml_config
from tests import base

fixtures_path = os.path.join(os.path.dirname(__file__), '..', 'pipeline',
                             'fixtures')


class TestReplaceXmlVersion(base.BaseTestCase):

    def test_first_line_only(self):
        config = ('<?xml version="1.1" encoding="UTF-8"?>\n'
                  '<flow-definition>\n'
                  '  <description>version 1.1</description>\n'
                  '</flow-definition>')
        replaced = xml_config.replace_xml_version(config, '1.1', '1.0')
        self.assertEqual(
            '<?xml version="1.0" encoding="UTF-8"?>', replaced.split('\n')[0])
        self.assertIn('<description>version 1.1</description>', replaced)

    def test_single_line(self):
        self.assertEqual('<a>1.1</a>',
                         xml_config.replace_xml_version('<a>1.0</a>',
                                                        '1.0', '1.1'))


class TestXmlPipelineGenerator(base.BaseTestCase):

    def _read_fixture(self):
        with io.open(os.path.join(fixtures_path, 'minimal.xml'), 'r',
                     encoding='utf-8') as f:
            return f.read()

    def _minimal(self):
        return d.PipelineDefinition(
            type='pipeline',
            pipeline=d.NoScmPipeline(name='minimal', description='for test',
                                     jenkinsfile="node{echo 'hello'}"))

    def test_encode(self):
        expected = self._read_fixture()
        self.assertEqual(expected.strip(),
                         xml_config.encode(self._minimal()).strip())

    def test_decode(self):
        config = self._read_fixture()
        self.assertEqual(self._minimal(),
                         xml_config.decode(config, 'minimal'))

    def test_generate_xml(self):
        generator = xml_config.XmlPipelineGenerator(indent=4)
        xml_pipeline = generator.generateXML(self._minimal())
        self.assertEqual('minimal', xml_pipeline.name)
        output = xml_pipeline.output()
        self.assertTrue(output.startswith('<?xml version="1.1"'))
        self.assertIn('\n    <description>for test</description>', output)

    def test_mismatched_union(self):
        definition = d.PipelineDefinition(
            type='multi-branch-pipeline',
            pipeline=d.NoScmPipeline(name='minimal'))
        with ExpectedException(errors.InvalidPipelineError):
            xml_config.encode(definition)

    def test_unknown_root(self):
        with ExpectedException(errors.PipelineParseError,
                               "can not find pipeline definition in "
                               "<project>"):
            xml_config.decode('<?xml version="1.1" encoding="UTF-8"?>\n'
                              '<project><description/></project>')

    def test_malformed(self):
        with ExpectedException(errors.PipelineParseError,
                               "can not parse pipeline config"):
            xml_config.decode('<flow-definition><description>')

    def test_xml_1_1(self):
        definition = xml_config.decode(
            "<?xml version='1.1' encoding='UTF-8'?>\n"
            "<flow-definition plugin='workflow-job@2.39'>\n"
            "  <description>old</description>\n"
            "</flow-definition>\n", 'old')
        self.assertEqual(d.NoScmPipeline(name='old', description='old'),
                         definition.pipeline)
