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


# Load pipeline definitions from YAML or JSON files.

import copy
import io
import logging
import os

import yaml

from jenkins_pipelines.definitions import PIPELINE_TYPES
from jenkins_pipelines.definitions import PipelineDefinition
from jenkins_pipelines.errors import JenkinsPipelinesException

__all__ = [
    "PipelineParser"
]

logger = logging.getLogger(__name__)

PIPELINE_KIND = 'Pipeline'
EXTENSIONS = ('.yaml', '.yml', '.json')


class PipelineParser(object):
    """Reads pipeline definitions.

    A document holds either a single pipeline spec::

      type: pipeline
      pipeline:
        name: hello
        jenkinsfile: "node { echo 'hello' }"

    a list of such specs, or Pipeline resources::

      apiVersion: devops.kubesphere.io/v1alpha3
      kind: Pipeline
      metadata:
        name: hello
        namespace: demo-project
      spec:
        type: pipeline
        pipeline:
          jenkinsfile: "node { echo 'hello' }"

    The name of a resource is used when its pipeline has none, and its
    namespace is the devops project of the pipeline.
    """

    def __init__(self, config=None):
        self.config = config
        self.pipelines = []
        if config is not None:
            self.default_project = config.pipelines['project']
            self.allow_unknown_parameters = \
                config.yamlparser['allow_unknown_parameters']
        else:
            self.default_project = ''
            self.allow_unknown_parameters = False

    def load_files(self, fn):
        """Parse every definition file found in ``fn``.

        ``fn`` is a list of file names, directories or file-like objects.
        Returns the list of ``(definition, project_name)`` pairs read so far.
        """
        files_to_process = []
        for path in fn:
            if not hasattr(path, 'read') and os.path.isdir(path):
                files_to_process.extend([os.path.join(path, f)
                                         for f in sorted(os.listdir(path))
                                         if f.endswith(EXTENSIONS)])
            else:
                files_to_process.append(path)

        for in_file in files_to_process:
            self.parse(in_file)
        return self.pipelines

    def parse(self, fn):
        if hasattr(fn, 'read'):
            name = getattr(fn, 'name', '<stream>')
            data = yaml.safe_load(fn)
        else:
            name = fn
            with io.open(fn, 'r', encoding='utf-8') as fp:
                data = yaml.safe_load(fp)

        logger.debug("Parsing pipelines from %s", name)
        if data is None:
            logger.warning("No pipeline definition in %s", name)
            return []

        if not isinstance(data, list):
            data = [data]

        pipelines = []
        for item in data:
            pipelines.append(self.parse_item(item, name))
        self.pipelines.extend(pipelines)
        return pipelines

    def parse_item(self, item, fn='<data>'):
        if not isinstance(item, dict):
            raise JenkinsPipelinesException(
                "The pipeline definitions in {0} must be mappings, "
                "got {1!r}".format(fn, item))

        project = self.default_project
        if item.get('kind') == PIPELINE_KIND:
            metadata = item.get('metadata') or {}
            project = metadata.get('namespace') or project
            spec = copy.deepcopy(item.get('spec') or {})
            attribute = PIPELINE_TYPES.get(spec.get('type'))
            payload = spec.get(attribute) if attribute else None
            if isinstance(payload, dict) and 'name' in metadata:
                payload.setdefault('name', metadata['name'])
        else:
            spec = item

        definition = PipelineDefinition.from_dict(
            spec, allow_unknown_parameters=self.allow_unknown_parameters)
        return definition, project
