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
import sys

from stevedore import extension

from jenkins_pipelines.cli.parser import create_parser
from jenkins_pipelines.config import PipelinesConfig

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger()


class JenkinsPipelines(object):
    """ This is the entry point class for the `jenkins-pipelines` command line
    tool. Scripts may pass `jenkins-pipelines` args directly to this class
    instead of running the tool as a system command. Tests of subcommands
    provide their configuration as an .ini file fixture rather than
    modifying configuration objects.
    """

    def __init__(self, args=None, **kwargs):
        if args is None:
            args = []
        self.parser = create_parser()
        self.options = self.parser.parse_args(args)

        self.config = PipelinesConfig(self.options.conf, **kwargs)

        if not self.options.command:
            self.parser.error("Must specify a 'command' to be performed")

        if (self.options.log_level is not None):
            self.options.log_level = getattr(logging,
                                             self.options.log_level.upper(),
                                             logger.getEffectiveLevel())
            logger.setLevel(self.options.log_level)

        self._parse_additional()
        self.config.validate()

    def _set_config(self, target, option):
        """
        Sets the option in target only if the given option was explicitly set
        """
        opt_val = getattr(self.options, option, None)
        if opt_val is not None:
            target[option] = opt_val

    def _parse_additional(self):

        self._set_config(self.config.pipelines, 'project')
        self._set_config(self.config.pipelines, 'config_xml')
        self._set_config(self.config.yamlparser, 'allow_unknown_parameters')

        if getattr(self.options, 'path', None):
            if hasattr(self.options.path, 'read'):
                logger.debug("Input file is stdin")
                if self.options.path.isatty():
                    logger.warning("Reading configuration from STDIN. "
                                   "Press CTRL+D to end input.")
                self.options.path = [self.options.path]
            else:
                # take list of paths
                self.options.path = self.options.path.split(os.pathsep)

    def execute(self):

        extension_manager = extension.ExtensionManager(
            namespace='jenkins_pipelines.cli.subcommands',
            invoke_on_load=True,)

        ext = extension_manager[self.options.command]
        ext.obj.execute(self.options, self.config)


def main():
    argv = sys.argv[1:]
    pipelines = JenkinsPipelines(argv)
    pipelines.execute()


if __name__ == "__main__":
    main()
