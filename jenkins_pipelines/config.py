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


# Manage jenkins-pipelines configuration sources, defaults, and access.

from collections import defaultdict
import configparser
import io
import logging
import os

from jenkins_pipelines.errors import PipelineConfigException

__all__ = [
    "PipelinesConfig"
]

logger = logging.getLogger(__name__)

DEFAULT_CONF = """
[pipelines]
project=
indent=2
config_xml=False

[yaml]
allow_unknown_parameters=False
"""

CONFIG_REQUIRED_MESSAGE = ("A valid configuration file is required. "
                           "No configuration file passed.")


class PipelinesConfig(object):

    def __init__(self, config_filename=None,
                 config_file_required=False):

        """
        The PipelinesConfig class resolves priority between all sources of
        configuration, so that the command line tool and users of the
        library read settings the same way.

        :arg str config_filename: Name of configuration file on which to base
            this config object.
        :arg bool config_file_required: Allows users of the PipelinesConfig
            class to decide whether or not it's really necessary for a config
            file to be passed in when creating an instance. It determines
            whether or not failure to read some config file will raise an
            exception or simply log a warning message indicating that no
            config file was found.
        """

        config_parser = self._init_defaults()

        global_conf = '/etc/jenkins_pipelines/jenkins_pipelines.ini'
        user_conf = os.path.join(os.path.expanduser('~'), '.config',
                                 'jenkins_pipelines', 'jenkins_pipelines.ini')
        local_conf = os.path.join(os.path.dirname(__file__),
                                  'jenkins_pipelines.ini')
        conf = None
        if config_filename is not None:
            conf = config_filename
        else:
            if os.path.isfile(local_conf):
                conf = local_conf
            elif os.path.isfile(user_conf):
                conf = user_conf
            else:
                conf = global_conf

        config_fp = None
        try:
            config_fp = self._read_config_file(conf)
        except PipelineConfigException:
            if config_file_required:
                raise PipelineConfigException(CONFIG_REQUIRED_MESSAGE)
            else:
                logger.warning("Config file, {0}, not found. Using "
                               "default config values.".format(conf))

        if config_fp is not None:
            with config_fp:
                config_parser.read_file(config_fp)

        self.config_parser = config_parser

        self.pipelines = defaultdict(None)
        self.yamlparser = defaultdict(None)

        self._setup()

    def _init_defaults(self):
        """ Initialize default configuration values using DEFAULT_CONF
        """
        config = configparser.ConfigParser()
        # Load default config always
        config.read_string(DEFAULT_CONF)
        return config

    def _read_config_file(self, config_filename):
        """ Given path to configuration file, open it for the ConfigParser
        and return the file object.
        """
        if os.path.isfile(config_filename):
            logger.debug("Reading config from {0}".format(config_filename))
            config_fp = io.open(config_filename, 'r', encoding='utf-8')
        else:
            raise PipelineConfigException(
                "A valid configuration file is required. "
                "\n{0} is not valid.".format(config_filename))

        return config_fp

    def _setup(self):
        config = self.config_parser

        logger.debug("Config: {0}".format(config))

        self.pipelines['project'] = config.get('pipelines', 'project')

        try:
            self.pipelines['indent'] = config.getint('pipelines', 'indent')
        except ValueError:
            raise PipelineConfigException(
                "indent must be an integer, got '{0}'".format(
                    config.get('pipelines', 'indent')))

        self.pipelines['config_xml'] = config.getboolean('pipelines',
                                                         'config_xml')

        self.yamlparser['allow_unknown_parameters'] = config.getboolean(
            'yaml', 'allow_unknown_parameters')

    def validate(self):
        if self.pipelines['indent'] < 0:
            raise PipelineConfigException(
                "indent can not be negative, got {0}".format(
                    self.pipelines['indent']))

