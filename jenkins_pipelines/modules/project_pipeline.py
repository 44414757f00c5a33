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
The Pipeline Project module handles single Jenkins Pipeline jobs whose
Jenkinsfile is stored inline in the job, without any SCM.
Use ``pipeline`` as the ``type`` of a pipeline definition.

Requires the Jenkins Pipeline plugin.

Example:

.. literalinclude:: /../../tests/pipeline/fixtures/full.yaml
"""

import logging
import xml.etree.ElementTree as XML

from jenkins_pipelines.definitions import NoScmPipeline
from jenkins_pipelines.definitions import RemoteTrigger
from jenkins_pipelines.errors import PipelineParseError
import jenkins_pipelines.modules.base
import jenkins_pipelines.modules.helpers as helpers
import jenkins_pipelines.modules.parameters as parameters
import jenkins_pipelines.modules.properties as properties
import jenkins_pipelines.modules.triggers as triggers
from jenkins_pipelines.xml_config import XmlPipeline
from jenkins_pipelines.xml_config import parse_xml

logger = logging.getLogger(__name__)

DECLARATIVE_PREFIX = 'org.jenkinsci.plugins.pipeline.modeldefinition.actions.'


class Pipeline(jenkins_pipelines.modules.base.Base):
    kind = 'pipeline'
    root_tag = 'flow-definition'

    def root_xml(self, data, project_name=''):
        xml_parent = XML.Element(self.root_tag, {'plugin': 'workflow-job'})
        actions = XML.SubElement(xml_parent, 'actions')
        XML.SubElement(actions, DECLARATIVE_PREFIX + 'DeclarativeJobAction',
                       {'plugin': 'pipeline-model-definition'})
        tracker = XML.SubElement(
            actions, DECLARATIVE_PREFIX + 'DeclarativeJobPropertyTrackerAction',
            {'plugin': 'pipeline-model-definition'})
        for tag in ('jobProperties', 'triggers', 'parameters', 'options'):
            XML.SubElement(tracker, tag)

        XML.SubElement(xml_parent, 'description').text = data.description

        props = XML.SubElement(xml_parent, 'properties')
        if data.disable_concurrent:
            properties.disable_concurrent(props)
        if data.discarder is not None:
            properties.build_discarder(props, data.discarder)
        if data.parameters:
            parameters.gen_xml(props, data.parameters)
        if data.timer_trigger is not None:
            triggers.timed(props, data.timer_trigger)

        definition = XML.SubElement(xml_parent, 'definition', {
            'class': 'org.jenkinsci.plugins.workflow.cps.CpsFlowDefinition',
            'plugin': 'workflow-cps',
        })
        XML.SubElement(definition, 'script').text = data.jenkinsfile
        XML.SubElement(definition, 'sandbox').text = 'true'

        XML.SubElement(xml_parent, 'triggers')
        if data.remote_trigger is not None:
            XML.SubElement(xml_parent, 'authToken').text = \
                data.remote_trigger.token
        XML.SubElement(xml_parent, 'disabled').text = 'false'

        return xml_parent

    def from_xml(self, root):
        if root.tag != self.root_tag:
            raise PipelineParseError("can not find pipeline definition")

        pipeline = NoScmPipeline(
            name='', description=helpers.get_text(root, 'description'))

        props = root.find('properties')
        if props is not None:
            pipeline.disable_concurrent = \
                props.find(properties.DISABLE_CONCURRENT_TAG) is not None
            pipeline.discarder = properties.build_discarder_from_xml(props)
            pipeline.parameters = parameters.from_xml(props)
            pipeline.timer_trigger = triggers.timed_from_xml(props)

        auth_token = root.find('authToken')
        if auth_token is not None:
            pipeline.remote_trigger = RemoteTrigger(
                token=auth_token.text or '')
        pipeline.jenkinsfile = helpers.get_text(root, 'definition/script')

        return pipeline


def encode_pipeline(pipeline, indent=2):
    """Return the ``config.xml`` text of a single pipeline."""
    xml = Pipeline().root_xml(pipeline)
    return XmlPipeline(xml, pipeline.name, indent).output()


def decode_pipeline(config, name=''):
    """Read a single pipeline from the text of its ``config.xml``."""
    pipeline = Pipeline().from_xml(parse_xml(config))
    pipeline.name = name
    return pipeline
