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

# Base class for a jenkins_pipelines project module


class Base(object):
    """
    A base class for a Jenkins Pipelines project module.

    A project module knows how to turn one kind of pipeline definition into
    the root element of a Jenkins ``config.xml`` and back again. Modules
    hold no state between calls.
    """

    #: Name of the pipeline kind handled by the module. It is used in error
    #: messages.
    kind = None

    #: Tag of the root element produced by :meth:`root_xml`.
    root_tag = None

    def root_xml(self, data, project_name=''):
        """Build the XML element tree for a pipeline definition.

        :arg data: the pipeline definition to convert
        :arg str project_name: the devops project the pipeline belongs to
        :rtype: xml.etree.ElementTree.Element
        """

        raise NotImplementedError()

    def from_xml(self, root):
        """Build a pipeline definition from a parsed ``config.xml``.

        :arg Element root: the root element of the document
        """

        raise NotImplementedError()
