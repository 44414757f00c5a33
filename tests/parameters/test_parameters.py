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


import xml.etree.ElementTree as XML

from jenkins_pipelines import definitions as d
from jenkins_pipelines.modules import parameters
from tests import base


class TestParameters(base.BaseTestCase):

    def test_choice_in_string_array(self):
        props = XML.fromstring(
            '<properties>'
            '<hudson.model.ParametersDefinitionProperty>'
            '<parameterDefinitions>'
            '<hudson.model.ChoiceParameterDefinition>'
            '<name>target</name><description/>'
            '<choices class="java.util.Arrays$ArrayList">'
            '<a class="string-array"><string>a</string><string>b</string></a>'
            '</choices>'
            '</hudson.model.ChoiceParameterDefinition>'
            '</parameterDefinitions>'
            '</hudson.model.ParametersDefinitionProperty>'
            '</properties>')
        self.assertEqual(
            [d.Parameter(name='target', type='choice', default_value='a\nb')],
            parameters.from_xml(props))

    def test_choice_without_string_array(self):
        # multi-branch pipelines list the choices directly
        props = XML.fromstring(
            '<properties>'
            '<hudson.model.ParametersDefinitionProperty>'
            '<parameterDefinitions>'
            '<hudson.model.ChoiceParameterDefinition>'
            '<name>target</name><description>where</description>'
            '<choices class="java.util.Arrays$ArrayList">'
            '<string>a</string><string>b</string><string>c</string>'
            '</choices>'
            '</hudson.model.ChoiceParameterDefinition>'
            '</parameterDefinitions>'
            '</hudson.model.ParametersDefinitionProperty>'
            '</properties>')
        self.assertEqual(
            [d.Parameter(name='target', type='choice',
                         default_value='a\nb\nc', description='where')],
            parameters.from_xml(props))

    def test_unknown_parameter_tag(self):
        props = XML.fromstring(
            '<properties>'
            '<hudson.model.ParametersDefinitionProperty>'
            '<parameterDefinitions>'
            '<hudson.model.RunParameterDefinition>'
            '<name>run</name><description>last run</description>'
            '<projectName>other</projectName>'
            '</hudson.model.RunParameterDefinition>'
            '</parameterDefinitions>'
            '</hudson.model.ParametersDefinitionProperty>'
            '</properties>')
        params = parameters.from_xml(props)
        self.assertEqual(
            [d.UnknownParameter(name='run',
                                type='hudson.model.RunParameterDefinition',
                                default_value='unknown',
                                description='last run')],
            params)
        self.assertFalse(params[0].known)
        self.assertIn("Unknown parameter definition", self.logger.output)

    def test_no_parameters(self):
        self.assertIsNone(parameters.from_xml(XML.Element('properties')))

    def test_empty_parameters(self):
        props = XML.Element('properties')
        parameters.gen_xml(props, [])
        self.assertIsNone(parameters.from_xml(props))

    def test_unknown_parameter_is_skipped(self):
        props = XML.Element('properties')
        pdefs = parameters.gen_xml(props, [
            d.UnknownParameter(name='run', type='run'),
            d.Parameter(name='a', type='string', default_value='abc'),
        ])
        self.assertEqual(['hudson.model.StringParameterDefinition'],
                         [pdef.tag for pdef in pdefs])
        self.assertIn("Skipping parameter 'run'", self.logger.output)

    def test_file_has_no_default(self):
        props = XML.Element('properties')
        pdefs = parameters.gen_xml(props, [
            d.Parameter(name='patch', type='file', default_value='ignored')])
        self.assertIsNone(pdefs[0].find('defaultValue'))
        self.assertEqual([d.Parameter(name='patch', type='file')],
                         parameters.from_xml(props))
