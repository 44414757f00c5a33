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


# Manage Jenkins XML config file output.

import logging
import re
from xml.dom import minidom
import xml.etree.ElementTree as XML

from stevedore import extension

from jenkins_pipelines import definitions
from jenkins_pipelines import errors

__all__ = [
    "encode",
    "decode",
    "XmlPipeline",
    "XmlPipelineGenerator",
]

logger = logging.getLogger(__name__)

# characters XML 1.0 does not allow, even as character references
INVALID_XML_CHARS = re.compile(
    u'[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')
CARRIAGE_RETURN = b'&#13;'


def replace_xml_version(config, old_version, target_version):
    """Replace the XML version, looking at the first line only.

    Jenkins writes ``config.xml`` as XML 1.1, which the parser does not
    accept, so documents are read as 1.0 and written back as 1.1.
    """
    lines = config.split('\n')
    lines[0] = lines[0].replace(old_version, target_version)
    return '\n'.join(lines)


def parse_xml(config):
    """Parse a Jenkins ``config.xml`` and return its root element."""
    config = replace_xml_version(config, '1.1', '1.0')
    try:
        return XML.fromstring(config.encode('utf-8'))
    except XML.ParseError as e:
        raise errors.PipelineParseError(
            "can not parse pipeline config: {0}".format(e))


class XmlPipeline(object):
    def __init__(self, xml, name, indent=2):
        self.xml = xml
        self.name = name
        self.indent = indent

    def check_characters(self):
        """Refuse text that can not be written as XML 1.0."""
        for elem in self.xml.iter():
            values = [elem.text] + list(elem.attrib.values())
            for value in values:
                if value and INVALID_XML_CHARS.search(value):
                    raise errors.InvalidAttributeError(
                        elem.tag, value, module_name=self.name)

    def output(self):
        self.check_characters()
        # the parser would fold \r\n into \n, keep carriage returns as
        # character references
        config = XML.tostring(self.xml, encoding='UTF-8')
        out = minidom.parseString(config.replace(b'\r', CARRIAGE_RETURN))
        pretty = out.toprettyxml(indent=' ' * self.indent, encoding='utf-8')
        pretty = pretty.replace(b'\r', CARRIAGE_RETURN)
        return replace_xml_version(pretty.decode('utf-8'), '1.0', '1.1')


class XmlPipelineGenerator(object):
    """Generates and reads Jenkins configuration XML of pipelines.

    Project modules are found in the ``entry_point_group`` by the
    ``type`` of a :class:`~jenkins_pipelines.definitions.PipelineDefinition`.
    Each module knows the root tag of the documents it writes, which is how
    a document is matched back to its module.
    """
    entry_point_group = 'jenkins_pipelines.projects'

    def __init__(self, indent=2):
        self.indent = indent
        self.extension_manager = extension.ExtensionManager(
            namespace=self.entry_point_group,
            invoke_on_load=True)

    def _get_module(self, kind):
        if kind in self.extension_manager.names():
            return self.extension_manager[kind].obj
        raise errors.JenkinsPipelinesException(
            'Unrecognized type: {0} (supported types are: {1})'.format(
                kind, ', '.join(sorted(self.extension_manager.names()))))

    def generateXML(self, definition, project_name=''):
        definition.validate()
        module = self._get_module(definition.type)
        xml = module.root_xml(definition.payload, project_name)
        return XmlPipeline(xml, definition.name, self.indent)

    def parseXML(self, config, name=''):
        root = parse_xml(config)
        for ext in self.extension_manager:
            if ext.obj.root_tag == root.tag:
                break
        else:
            raise errors.PipelineParseError(
                "can not find pipeline definition in <{0}>".format(root.tag))

        pipeline = ext.obj.from_xml(root)
        pipeline.name = name
        definition = definitions.PipelineDefinition(type=ext.name)
        setattr(definition, definitions.PIPELINE_TYPES[ext.name], pipeline)
        return definition


def encode(definition, project_name='', indent=2):
    """Convert a pipeline definition to the text of its ``config.xml``.

    :arg PipelineDefinition definition: the pipeline to convert
    :arg str project_name: the devops project of the pipeline, used to
        build the id of a multi-branch source
    """
    generator = XmlPipelineGenerator(indent)
    return generator.generateXML(definition, project_name).output()


def decode(config, name=''):
    """Read a pipeline definition from the text of a ``config.xml``.

    The job name is not part of the document, so ``name`` is set on the
    decoded pipeline.
    """
    return XmlPipelineGenerator().parseXML(config, name)
