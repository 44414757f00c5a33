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


import logging
import os

from jenkins_pipelines.parser import PipelineParser
from jenkins_pipelines.xml_config import XmlPipelineGenerator
import jenkins_pipelines.cli.subcommand.base as base


logger = logging.getLogger(__name__)


class EncodeSubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        encode = subparser.add_parser('encode')

        self.parse_arg_path(
            encode,
            help="colon-separated list of paths to YAML or JSON files "
            "or directories")
        self.parse_option_output(encode, help='path to output XML')

        encode.add_argument(
            '--config-xml',
            action='store_true',
            dest='config_xml',
            default=None,
            help='use alternative output file layout using config.xml files')
        encode.add_argument(
            '--allow-unknown-parameters',
            action='store_true',
            dest='allow_unknown_parameters',
            default=None,
            help='skip parameters of unsupported types instead of failing')

    def _setup_output(self, output, name, config_xml=False):
        if config_xml:
            return os.path.join(output, name, 'config.xml')
        return os.path.join(output, name + '.xml')

    def execute(self, options, config):
        parser = PipelineParser(config)
        pipelines = parser.load_files(options.path)
        logger.info("Number of pipelines read:  %d", len(pipelines))

        generator = XmlPipelineGenerator(config.pipelines['indent'])
        for definition, project in pipelines:
            xml_pipeline = generator.generateXML(definition, project)
            logger.info("Pipeline name:  %s", xml_pipeline.name)

            output = options.output
            if not hasattr(output, 'write'):
                output = self._setup_output(output, xml_pipeline.name,
                                            config.pipelines['config_xml'])
            self.write(output, xml_pipeline.output())
