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
The Triggers module writes the triggers that start a pipeline.

A single pipeline runs on a cron ``spec``. A multi-branch pipeline scans its
branch source every ``interval`` milliseconds; Jenkins still wants a crontab
for that, so one is derived from the interval.

Example::

  pipeline:
    name: nightly
    timer_trigger:
      cron: "H 2 * * *"

  multi_branch_pipeline:
    name: branches
    timer_trigger:
      interval: "3600000"
"""

import xml.etree.ElementTree as XML

from jenkins_pipelines.definitions import TimerTrigger
from jenkins_pipelines.errors import InvalidAttributeError
import jenkins_pipelines.modules.helpers as helpers

PIPELINE_TRIGGERS_TAG = ('org.jenkinsci.plugins.workflow.job.properties.'
                         'PipelineTriggersJobProperty')
TIMER_TRIGGER_TAG = 'hudson.triggers.TimerTrigger'
PERIODIC_FOLDER_TRIGGER_TAG = ('com.cloudbees.hudson.plugins.folder.computed.'
                               'PeriodicFolderTrigger')

NANOS_PER_MILLI = 1000 * 1000
NANOS_PER_MINUTE = 60 * 1000 * NANOS_PER_MILLI
NANOS_PER_HOUR = 60 * NANOS_PER_MINUTE

# inclusive upper bounds, checked in order
CRONTAB_THRESHOLDS = [
    (5 * NANOS_PER_MINUTE, '* * * * *'),
    (30 * NANOS_PER_MINUTE, 'H/5 * * * *'),
    (1 * NANOS_PER_HOUR, 'H/15 * * * *'),
    (8 * NANOS_PER_HOUR, 'H/30 * * * *'),
    (24 * NANOS_PER_HOUR, 'H H/4 * * *'),
    (48 * NANOS_PER_HOUR, 'H H/12 * * *'),
]
DEFAULT_CRONTAB = 'H H * * *'


def millis_to_cron(millis):
    """Return the crontab Jenkins uses to scan every ``millis`` ms."""
    nanos = int(millis) * NANOS_PER_MILLI
    for bound, crontab in CRONTAB_THRESHOLDS:
        if nanos <= bound:
            return crontab
    return DEFAULT_CRONTAB


def timed(xml_parent, timer_trigger):
    """Build periodically, following the cron spec of the trigger."""
    triggers = XML.SubElement(
        XML.SubElement(xml_parent, PIPELINE_TRIGGERS_TAG), 'triggers')
    timer = XML.SubElement(triggers, TIMER_TRIGGER_TAG)
    XML.SubElement(timer, 'spec').text = timer_trigger.cron


def timed_from_xml(xml_parent):
    spec = xml_parent.find('/'.join(
        [PIPELINE_TRIGGERS_TAG, 'triggers', TIMER_TRIGGER_TAG, 'spec']))
    if spec is None:
        return None
    return TimerTrigger(cron=spec.text or '')


def periodic_folder(xml_parent, timer_trigger):
    """Scan a multi-branch project every ``interval`` milliseconds."""
    try:
        millis = int(timer_trigger.interval)
    except (TypeError, ValueError):
        raise InvalidAttributeError('interval', timer_trigger.interval,
                                    module_name='timer_trigger')

    trigger = XML.SubElement(xml_parent, PERIODIC_FOLDER_TRIGGER_TAG,
                             {'plugin': 'cloudbees-folder'})
    XML.SubElement(trigger, 'spec').text = millis_to_cron(millis)
    XML.SubElement(trigger, 'interval').text = timer_trigger.interval
    XML.SubElement(xml_parent, 'disabled').text = 'false'


def periodic_folder_from_xml(xml_parent):
    trigger = xml_parent.find(PERIODIC_FOLDER_TRIGGER_TAG)
    if trigger is None:
        return None
    return TimerTrigger(interval=helpers.get_text(trigger, 'interval'))
