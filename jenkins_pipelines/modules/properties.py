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
The Properties module holds the job properties shared by the pipeline
kinds: build retention, concurrent build blocking and the jobs triggered
when a branch comes and goes.

Example::

  pipeline:
    name: test_pipeline
    disable_concurrent: true
    discarder:
      days_to_keep: 7
      num_to_keep: 10
"""

import xml.etree.ElementTree as XML

from jenkins_pipelines.definitions import DiscarderProperty
from jenkins_pipelines.definitions import MultiBranchJobTrigger
import jenkins_pipelines.modules.helpers as helpers

DISABLE_CONCURRENT_TAG = ('org.jenkinsci.plugins.workflow.job.properties.'
                          'DisableConcurrentBuildsJobProperty')
BUILD_DISCARDER_TAG = 'jenkins.model.BuildDiscarderProperty'
JOB_TRIGGER_TAG = ('org.jenkinsci.plugins.workflow.multibranch.'
                   'PipelineTriggerProperty')
ORPHANED_ITEM_TAG = 'orphanedItemStrategy'


def disable_concurrent(xml_parent):
    XML.SubElement(xml_parent, DISABLE_CONCURRENT_TAG)


def build_discarder(xml_parent, discarder):
    """Keep a limited number of builds.

    Artifacts follow the builds, so both artifact limits are always -1.
    """
    strategy = XML.SubElement(
        XML.SubElement(xml_parent, BUILD_DISCARDER_TAG),
        'strategy', {'class': 'hudson.tasks.LogRotator'})
    mapping = [
        ('days_to_keep', 'daysToKeep', ''),
        ('num_to_keep', 'numToKeep', ''),
        ('artifact_days_to_keep', 'artifactDaysToKeep', -1),
        ('artifact_num_to_keep', 'artifactNumToKeep', -1),
    ]
    helpers.convert_mapping_to_xml(strategy, discarder.to_dict(), mapping)


def build_discarder_from_xml(xml_parent):
    strategy = xml_parent.find(BUILD_DISCARDER_TAG + '/strategy')
    if strategy is None:
        return None
    return DiscarderProperty(
        days_to_keep=helpers.get_text(strategy, 'daysToKeep'),
        num_to_keep=helpers.get_text(strategy, 'numToKeep'))


def orphaned_item_strategy(xml_parent, discarder):
    """Prune branches that went away from a multi-branch project."""
    strategy = XML.SubElement(xml_parent, ORPHANED_ITEM_TAG, {
        'class': 'com.cloudbees.hudson.plugins.folder.computed.'
                 'DefaultOrphanedItemStrategy',
        'plugin': 'cloudbees-folder',
    })
    mapping = [
        ('prune_dead_branches', 'pruneDeadBranches', True),
        ('days_to_keep', 'daysToKeep', ''),
        ('num_to_keep', 'numToKeep', ''),
    ]
    helpers.convert_mapping_to_xml(strategy, discarder.to_dict(), mapping)


def orphaned_item_strategy_from_xml(xml_parent):
    strategy = xml_parent.find(ORPHANED_ITEM_TAG)
    if strategy is None:
        return None
    return DiscarderProperty(
        days_to_keep=helpers.get_text(strategy, 'daysToKeep'),
        num_to_keep=helpers.get_text(strategy, 'numToKeep'))


def multibranch_job_trigger(xml_parent, trigger):
    """Run other pipelines when a branch is created or deleted.

    Requires the Jenkins Multibranch Action Triggers plugin.
    """
    prop = XML.SubElement(xml_parent, JOB_TRIGGER_TAG,
                          {'plugin': 'multibranch-action-triggers'})
    XML.SubElement(prop, 'createActionJobsToTrigger').text = \
        trigger.create_action_jobs_to_trigger
    XML.SubElement(prop, 'deleteActionJobsToTrigger').text = \
        trigger.delete_action_jobs_to_trigger


def multibranch_job_trigger_from_xml(xml_parent):
    prop = xml_parent.find(JOB_TRIGGER_TAG)
    if prop is None:
        return None
    return MultiBranchJobTrigger(
        create_action_jobs_to_trigger=helpers.get_text(
            prop, 'createActionJobsToTrigger'),
        delete_action_jobs_to_trigger=helpers.get_text(
            prop, 'deleteActionJobsToTrigger'))
