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
import logging
import os

import yaml

from jenkins_pipelines.xml_config import XmlPipelineGenerator
import jenkins_pipelines.cli.subcommand.base as base


logger = logging.getLogger(__name__)


class DecodeSubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        decode = subparser.add_parser('decode')

        self.parse_arg_path(
            decode,
            help="colon-separated list of paths to config.xml files")
        self.parse_option_output(decode, help='path to output YAML')

        decode.add_argument(
            '--name',
            dest='name',
            default=None,
            help='name of the pipeline, guessed from the path by default')

    def _guess_name(self, path):
        basename = os.path.basename(path)
        if basename == 'config.xml':
            # OUTPUT/name/config.xml layout
            return os.path.basename(os.path.dirname(os.path.abspath(path)))
        return os.path.splitext(basename)[0]

    def execute(self, options, config):
        generator = XmlPipelineGenerator()

        definitions = []
        for path in options.path:
            if hasattr(path, 'read'):
                name = options.name or ''
                text = path.read()
            else:
                name = options.name or self._guess_name(path)
                with io.open(path, 'r', encoding='utf-8') as f:
                    text = f.read()
            logger.info("Pipeline name:  %s", name)
            definitions.append(generator.parseXML(text, name).to_dict())

        data = definitions[0] if len(definitions) == 1 else definitions
        self.write(options.output,
                   yaml.safe_dump(data, default_flow_style=False,
                                  sort_keys=False))
