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


"""
The Parameters module writes the build parameters of a pipeline.

Each parameter becomes one ``hudson.model.*ParameterDefinition`` element
under ``hudson.model.ParametersDefinitionProperty/parameterDefinitions``.

Example::

  pipeline:
    name: test_pipeline
    parameters:
      - name: FOO
        type: string
        default_value: bar
        description: "A parameter named FOO, defaults to 'bar'."
      - name: PROJECT
        type: choice
        default_value: "nova\nglance"
"""

import logging
import xml.etree.ElementTree as XML

from jenkins_pipelines.definitions import Parameter
from jenkins_pipelines.definitions import UnknownParameter
import jenkins_pipelines.modules.helpers as helpers

logger = logging.getLogger(__name__)

HMODEL = 'hudson.model.'
PROPERTY_TAG = HMODEL + 'ParametersDefinitionProperty'

PARAMETER_CLASSES = {
    'string': HMODEL + 'StringParameterDefinition',
    'text': HMODEL + 'TextParameterDefinition',
    'boolean': HMODEL + 'BooleanParameterDefinition',
    'password': HMODEL + 'PasswordParameterDefinition',
    'choice': HMODEL + 'ChoiceParameterDefinition',
    'file': HMODEL + 'FileParameterDefinition',
}

PARAMETER_TYPES = dict((v, k) for k, v in PARAMETER_CLASSES.items())


def base_param(xml_parent, param):
    pdef = XML.SubElement(xml_parent, PARAMETER_CLASSES[param.type])
    XML.SubElement(pdef, 'name').text = param.name
    XML.SubElement(pdef, 'description').text = param.description
    return pdef


def choice_param(xml_parent, param):
    pdef = base_param(xml_parent, param)
    choices = XML.SubElement(pdef, 'choices',
                             {'class': 'java.util.Arrays$ArrayList'})
    a = XML.SubElement(choices, 'a', {'class': 'string-array'})
    for choice in param.default_value.split('\n'):
        XML.SubElement(a, 'string').text = choice


def file_param(xml_parent, param):
    base_param(xml_parent, param)


def default_param(xml_parent, param):
    pdef = base_param(xml_parent, param)
    XML.SubElement(pdef, 'defaultValue').text = param.default_value


PARAMETER_WRITERS = {
    'choice': choice_param,
    'file': file_param,
}


def gen_xml(xml_parent, parameters):
    """Add the parameter definitions of a pipeline to ``properties``."""
    pdefp = XML.SubElement(xml_parent, PROPERTY_TAG)
    pdefs = XML.SubElement(pdefp, 'parameterDefinitions')
    for param in parameters:
        if not param.known or param.type not in PARAMETER_CLASSES:
            logger.warning("Skipping parameter '%s' of unsupported type '%s'",
                           param.name, param.type)
            continue
        writer = PARAMETER_WRITERS.get(param.type, default_param)
        writer(pdefs, param)
    return pdefs


def read_choices(pdef):
    choices = pdef.find('choices')
    if choices is None:
        return ''
    # the strings are wrapped in an <a> element only in some documents
    anchor = choices.find('a')
    if anchor is not None:
        choices = anchor
    return '\n'.join(
        (choice.text or '') for choice in choices.findall('string')).strip()


def from_xml(xml_parent):
    """Read the parameter definitions found under ``properties``.

    Returns ``None`` when there is no parameter at all.
    """
    pdefs = xml_parent.find(PROPERTY_TAG + '/parameterDefinitions')
    if pdefs is None:
        return None

    parameters = []
    for pdef in pdefs:
        name = helpers.get_text(pdef, 'name')
        description = helpers.get_text(pdef, 'description')
        ptype = PARAMETER_TYPES.get(pdef.tag)
        if ptype is None:
            logger.debug("Unknown parameter definition <%s> for '%s'",
                         pdef.tag, name)
            parameters.append(UnknownParameter(
                name=name, type=pdef.tag, description=description))
            continue

        if ptype == 'choice':
            default = read_choices(pdef)
        elif ptype == 'file':
            default = ''
        else:
            default = helpers.get_text(pdef, 'defaultValue')
        parameters.append(Parameter(name=name, type=ptype,
                                    default_value=default,
                                    description=description))

    return parameters or None
