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
The Multibranch Pipeline project module handles creating Jenkins workflow
projects that build every branch of a repository.
Use ``multi-branch-pipeline`` as the ``type`` of a pipeline definition.

The project always has exactly one branch source, see
:py:mod:`jenkins_pipelines.modules.scm` for the supported ones.

Requires the Jenkins Pipeline Multibranch and Branch API plugins.

Example:

.. literalinclude:: /../../tests/multibranch/fixtures/git.yaml
"""

import dataclasses
import logging
import xml.etree.ElementTree as XML

from jenkins_pipelines.definitions import MultiBranchPipeline
from jenkins_pipelines.errors import PipelineParseError
import jenkins_pipelines.modules.base
import jenkins_pipelines.modules.helpers as helpers
import jenkins_pipelines.modules.properties as properties
import jenkins_pipelines.modules.scm as scm
import jenkins_pipelines.modules.triggers as triggers
from jenkins_pipelines.xml_config import XmlPipeline
from jenkins_pipelines.xml_config import parse_xml

logger = logging.getLogger(__name__)


class WorkflowMultiBranch(jenkins_pipelines.modules.base.Base):
    kind = 'multi-branch-pipeline'
    root_tag = ('org.jenkinsci.plugins.workflow.multibranch.'
                'WorkflowMultiBranchProject')

    def _owner(self, xml_parent):
        XML.SubElement(xml_parent, 'owner', {
            'class': self.root_tag,
            'reference': '../..',
        })

    def root_xml(self, data, project_name=''):
        # unsupported source types are refused before any XML is built
        data.validate()
        codec = scm.SOURCE_TYPES[data.source_type]

        xml_parent = XML.Element(self.root_tag,
                                 {'plugin': 'workflow-multibranch'})

        #######################
        # Folder skeleton
        #######################

        XML.SubElement(xml_parent, 'actions')
        props = XML.SubElement(xml_parent, 'properties')
        folder_config = XML.SubElement(
            props,
            'org.jenkinsci.plugins.pipeline.modeldefinition.config.'
            'FolderConfig', {'plugin': 'pipeline-model-definition'})
        XML.SubElement(folder_config, 'dockerLabel')
        XML.SubElement(folder_config, 'registry',
                       {'plugin': 'docker-commons'})

        folder_views = XML.SubElement(xml_parent, 'folderViews', {
            'class': 'jenkins.branch.MultiBranchProjectViewHolder',
            'plugin': 'branch-api',
        })
        self._owner(folder_views)

        health = XML.SubElement(xml_parent, 'healthMetrics')
        worst_child = XML.SubElement(
            health,
            'com.cloudbees.hudson.plugins.folder.health.WorstChildHealthMetric',
            {'plugin': 'cloudbees-folder'})
        XML.SubElement(worst_child, 'nonRecursive').text = 'false'

        icon = XML.SubElement(xml_parent, 'icon', {
            'class': 'jenkins.branch.MetadataActionFolderIcon',
            'plugin': 'branch-api',
        })
        self._owner(icon)

        #######################
        # Pipeline settings
        #######################

        XML.SubElement(xml_parent, 'description').text = data.description

        if data.multibranch_job_trigger is not None:
            properties.multibranch_job_trigger(props,
                                               data.multibranch_job_trigger)

        if data.discarder is not None:
            properties.orphaned_item_strategy(xml_parent, data.discarder)

        trigger_parent = XML.SubElement(xml_parent, 'triggers')
        if data.timer_trigger is not None:
            triggers.periodic_folder(trigger_parent, data.timer_trigger)

        #######################
        # Branch source
        #######################

        sources = XML.SubElement(xml_parent, 'sources', {
            'class': 'jenkins.branch.MultiBranchProject$BranchSourceList',
            'plugin': 'branch-api',
        })
        self._owner(sources)
        branch_source = XML.SubElement(XML.SubElement(sources, 'data'),
                                       'jenkins.branch.BranchSource')
        strategy = XML.SubElement(branch_source, 'strategy', {
            'class': 'jenkins.branch.NamedExceptionsBranchPropertyStrategy'})
        XML.SubElement(strategy, 'defaultProperties', {'class': 'empty-list'})
        XML.SubElement(strategy, 'namedExceptions', {'class': 'empty-list'})

        # the id is derived from where the pipeline lives
        source = dataclasses.replace(data.source,
                                     scm_id=project_name + data.name)
        codec.gen_xml(XML.SubElement(branch_source, 'source'), source)

        factory = XML.SubElement(xml_parent, 'factory', {
            'class': 'org.jenkinsci.plugins.workflow.multibranch.'
                     'WorkflowBranchProjectFactory'})
        self._owner(factory)
        XML.SubElement(factory, 'scriptPath').text = data.script_path

        return xml_parent

    def from_xml(self, root):
        if root.tag != self.root_tag:
            raise PipelineParseError(
                "can not parse multi-branch pipeline config")

        pipeline = MultiBranchPipeline(
            name='', description=helpers.get_text(root, 'description'))

        props = root.find('properties')
        if props is not None:
            pipeline.multibranch_job_trigger = \
                properties.multibranch_job_trigger_from_xml(props)
        pipeline.discarder = properties.orphaned_item_strategy_from_xml(root)

        trigger_parent = root.find('triggers')
        if trigger_parent is not None:
            pipeline.timer_trigger = triggers.periodic_folder_from_xml(
                trigger_parent)

        source = root.find('sources/data/jenkins.branch.BranchSource/source')
        codec = None
        if source is not None:
            codec = scm.SOURCE_CLASSES.get(source.get('class'))
        if codec is None:
            raise PipelineParseError(
                "can not parse multi-branch pipeline config")
        pipeline.source_type = codec.source_type
        pipeline.source = codec.from_xml(source)

        # no script path when the project uses a default Jenkinsfile
        pipeline.script_path = helpers.get_text(root, 'factory/scriptPath')

        return pipeline


def encode_multibranch_pipeline(project_name, pipeline, indent=2):
    """Return the ``config.xml`` text of a multi-branch pipeline."""
    xml = WorkflowMultiBranch().root_xml(pipeline, project_name)
    return XmlPipeline(xml, pipeline.name, indent).output()


def decode_multibranch_pipeline(config, name=''):
    """Read a multi-branch pipeline from the text of its ``config.xml``."""
    pipeline = WorkflowMultiBranch().from_xml(parse_xml(config))
    pipeline.name = name
    return pipeline
