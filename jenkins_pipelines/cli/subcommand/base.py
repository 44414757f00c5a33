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


import abc
import errno
import io
import logging
import os
import sys

logger = logging.getLogger(__name__)


class BaseSubCommand(object, metaclass=abc.ABCMeta):
    """Base class for jenkins-pipelines subcommands, intended to allow
    subcommands to be loaded as stevedore extensions by third party users.
    """
    def __init__(self):
        pass

    @abc.abstractmethod
    def parse_args(self, subparsers):
        """Define subcommand arguments.

        :param subparsers
          A sub parser object. Implementations of this method should
          create a new subcommand parser by calling
            parser = subparsers.add_parser('command-name', ...)
        """

    @abc.abstractmethod
    def execute(self, options, config):
        """Execute subcommand behavior.

        :param options
          the parsed command line arguments
        :param config
          PipelinesConfig object containing final configuration from config
          files, command line arguments, and environment variables.
        """

    @staticmethod
    def parse_arg_path(parser, help):
        parser.add_argument(
            'path',
            nargs='?',
            default=sys.stdin,
            help=help)

    @staticmethod
    def parse_option_output(parser, help):
        parser.add_argument(
            '-o',
            dest='output',
            default=sys.stdout,
            help=help)

    @staticmethod
    def write(output, text):
        """Write text to a file-like object or to a file name."""
        if hasattr(output, 'write'):
            try:
                output.write(text)
            except IOError as exc:
                # EPIPE could happen if piping output to something
                # that doesn't read the whole input (e.g.: the UNIX
                # `head` command)
                if exc.errno != errno.EPIPE:
                    raise
            return

        output_dir = os.path.dirname(output)
        if output_dir and not os.path.isdir(output_dir):
            logger.debug("Creating directory %s" % output_dir)
            os.makedirs(output_dir)
        logger.debug("Writing to '{0}'".format(output))
        with io.open(output, 'w', encoding='utf-8') as f:
            f.write(text)
